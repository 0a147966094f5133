import os

# Must be set before any dayplanner import reads them
FERNET_KEY = "A" * 43 + "="

os.environ.setdefault("FERNET_SECRET", FERNET_KEY)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from datetime import datetime

import pytest
import pytz
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from dayplanner.config import Settings
from dayplanner.context import PlannerContext
from dayplanner.models.database import create_tables, make_session_factory
from dayplanner.models.task import Task
from dayplanner.models.user_preferences import UserPreferences
from dayplanner.services.billing_service import StripeGateway
from dayplanner.utils.encryption import configure_encryption
from dayplanner.utils.jwt_utils import create_access_token, create_cron_token
from dayplanner.utils.tier_logic import get_or_create_user
from dayplanner.utils.time_buckets import weekday_name

from .fakes import FakeClock, FakeCompletion, FakeSender

JWT_SECRET = "test-secret"
WEBHOOK_SECRET = "whsec_test_secret"

# Monday 2 March 2026, 13:50 UTC (08:50 in New York, EST)
DEFAULT_NOW = pytz.utc.localize(datetime(2026, 3, 2, 13, 50))


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET_KEY=JWT_SECRET,
        FERNET_SECRET=FERNET_KEY,
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET=WEBHOOK_SECRET,
        STRIPE_MONTHLY_PRICE_ID="price_monthly",
        STRIPE_YEARLY_PRICE_ID="price_yearly",
        APP_URL="https://planner.test",
        VAPID_PUBLIC_KEY="test-vapid-public",
        SCHEDULER_ENABLED=False,
    )


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(DEFAULT_NOW)


@pytest.fixture()
def context(settings, engine, clock) -> PlannerContext:
    configure_encryption(settings.FERNET_SECRET)
    return PlannerContext(
        settings=settings,
        session_factory=make_session_factory(engine),
        email=FakeSender("email"),
        sms=FakeSender("sms"),
        push=FakeSender("push"),
        completion=FakeCompletion(),
        billing=StripeGateway(settings),
        clock=clock,
        engine=engine,
    )


@pytest.fixture()
def db(context):
    session = context.session_factory()
    yield session
    session.close()


@pytest.fixture()
def make_prefs(db):
    def _make(user_id="user-1", **fields):
        get_or_create_user(db, user_id, fields.get("email"))
        values = {
            "user_id": user_id,
            "email": "",
            "timezone": "UTC",
            "email_reminders": False,
            "sms_reminders": False,
            "push_reminders": False,
            "reminder_time": 10,
        }
        values.update(fields)
        prefs = UserPreferences(**values)
        db.add(prefs)
        db.commit()
        return prefs
    return _make


@pytest.fixture()
def make_task(db):
    def _make(user_id="user-1", date="2026-03-02", start_time=9.0, **fields):
        values = {
            "user_id": user_id,
            "date": date,
            "day_of_week": weekday_name(date),
            "start_time": start_time,
            "duration": 1.0,
            "activity": "Write report",
            "description": "",
        }
        values.update(fields)
        task = Task(**values)
        db.add(task)
        db.commit()
        return task
    return _make


@pytest.fixture()
def make_premium(db):
    def _make(user_id="user-1"):
        user = get_or_create_user(db, user_id)
        user.is_premium = True
        db.commit()
        return user
    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user_id="user-1", **claims):
        token = create_access_token({"sub": user_id, **claims}, JWT_SECRET)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture()
def cron_headers():
    return {"Authorization": f"Bearer {create_cron_token(JWT_SECRET)}"}


@pytest.fixture()
def client(context):
    from fastapi.testclient import TestClient

    from dayplanner.main import create_app
    from dayplanner.utils.rate_limit_utils import limiter

    limiter.enabled = False
    app = create_app(context)
    with TestClient(app) as test_client:
        yield test_client
    limiter.enabled = True
