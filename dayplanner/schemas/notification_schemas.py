# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import re
from pydantic import BaseModel
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class SendEmailRequest(BaseModel):
    to: str
    subject: str
    text: Optional[str] = ""
    html: Optional[str] = None

    def has_valid_address(self) -> bool:
        return bool(EMAIL_PATTERN.match(self.to.strip()))


class SendSmsRequest(BaseModel):
    to: str
    message: str
    userId: str
