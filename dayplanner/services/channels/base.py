# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from dataclasses import dataclass, asdict
from typing import Optional

SUBSCRIPTION_INVALID = "SUBSCRIPTION_INVALID"


@dataclass
class ChannelResult:
    success: bool
    type: str  # email | sms | push
    recipient: Optional[str]
    error: Optional[str] = None
    permanent: bool = False  # push only: the subscription is gone for good

    def to_dict(self) -> dict:
        data = asdict(self)
        if data["error"] is None:
            data.pop("error")
        return data


def failure(channel: str, recipient: Optional[str], exc) -> ChannelResult:
    message = str(exc) if str(exc) else exc.__class__.__name__
    return ChannelResult(success=False, type=channel, recipient=recipient, error=message)


def reminder_text(task) -> str:
    text = f'Your task "{task.activity}" is starting soon.'
    if task.description:
        text += f"\n\nDetails: {task.description}"
    return text
