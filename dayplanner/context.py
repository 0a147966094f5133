# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Explicitly constructed dependencies shared by routers and scheduled jobs.

One PlannerContext is built at startup (build_context) and stored on
app.state; tests build their own with fake senders and an in-memory DB.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from fastapi import Request

from dayplanner.config import Settings
from dayplanner.utils.time_buckets import utc_now


@dataclass
class PlannerContext:
    settings: Settings
    session_factory: Callable
    email: object
    sms: object
    push: object
    completion: object
    billing: object
    clock: Callable[[], datetime] = field(default=utc_now)
    engine: object = None

    def now(self) -> datetime:
        return self.clock()


def build_context(settings: Settings = None) -> PlannerContext:
    from dayplanner.models.database import make_engine, make_session_factory
    from dayplanner.services.channels.email_sender import EmailSender
    from dayplanner.services.channels.sms_sender import SmsSender
    from dayplanner.services.channels.push_sender import PushSender
    from dayplanner.utils.ai_engine import CompletionClient
    from dayplanner.services.billing_service import StripeGateway
    from dayplanner.utils.encryption import configure_encryption

    settings = settings or Settings.from_env()
    configure_encryption(settings.FERNET_SECRET)
    engine = make_engine(settings.DATABASE_URL)

    return PlannerContext(
        settings=settings,
        session_factory=make_session_factory(engine),
        email=EmailSender(settings),
        sms=SmsSender(settings),
        push=PushSender(settings),
        completion=CompletionClient(settings),
        billing=StripeGateway(settings),
        engine=engine,
    )


# ✅ FastAPI dependencies
def get_context(request: Request) -> PlannerContext:
    return request.app.state.context


def get_db(request: Request):
    db = get_context(request).session_factory()
    try:
        yield db
    finally:
        db.close()
