"""Tests for dayplanner.services.billing_service with real Stripe signature checks."""

import hashlib
import hmac
import json
import time
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import stripe

from dayplanner.models.user import PremiumPlan, User
from dayplanner.services.billing_service import (
    BillingConfigError,
    StripeGateway,
    add_months,
    handle_webhook,
)
from dayplanner.utils.errors import SignatureError, ValidationError

from .conftest import DEFAULT_NOW, WEBHOOK_SECRET


def sign(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    timestamp = timestamp or int(time.time())
    digest = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def event(event_type: str, obj: dict) -> str:
    return json.dumps({"id": "evt_1", "type": event_type, "data": {"object": obj}})


CHECKOUT = {
    "id": "cs_1",
    "customer": "cus_1",
    "subscription": "sub_1",
    "customer_email": "me@example.com",
    "metadata": {"userId": "user-1", "plan": "monthly"},
}


class TestAddMonths:
    def test_simple(self):
        assert add_months(datetime(2026, 3, 2), 1) == datetime(2026, 4, 2)

    def test_month_end_is_clamped(self):
        assert add_months(datetime(2026, 1, 31), 1) == datetime(2026, 2, 28)

    def test_year_wrap(self):
        assert add_months(datetime(2026, 11, 15), 12) == datetime(2027, 11, 15)


class TestWebhook:
    def test_checkout_completed_activates_premium(self, context, db):
        payload = event("checkout.session.completed", CHECKOUT)

        assert handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW) == {"received": True}

        user = db.get(User, "user-1")
        assert user.is_premium is True
        assert user.premium_plan == PremiumPlan.monthly
        assert user.premium_start_date == datetime(2026, 3, 2, 13, 50)
        assert user.next_billing_date == datetime(2026, 4, 2, 13, 50)
        assert user.stripe_customer_id == "cus_1"
        assert user.stripe_subscription_id == "sub_1"

    def test_yearly_plan_bills_in_twelve_months(self, context, db):
        payload = event("checkout.session.completed", {**CHECKOUT, "metadata": {"userId": "user-1", "plan": "yearly"}})
        handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW)
        assert db.get(User, "user-1").next_billing_date == datetime(2027, 3, 2, 13, 50)

    def test_bad_signature_changes_nothing(self, context, db):
        payload = event("checkout.session.completed", CHECKOUT)
        with pytest.raises(SignatureError):
            handle_webhook(context.billing, db, payload.encode(), sign(payload, secret="whsec_wrong"), DEFAULT_NOW)
        assert db.get(User, "user-1") is None

    def test_tampered_body_rejected(self, context, db):
        payload = event("checkout.session.completed", CHECKOUT)
        header = sign(payload)
        tampered = payload.replace("monthly", "yearly")
        with pytest.raises(SignatureError):
            handle_webhook(context.billing, db, tampered.encode(), header, DEFAULT_NOW)

    def test_missing_signature(self, context, db):
        with pytest.raises(SignatureError):
            handle_webhook(context.billing, db, b"{}", None, DEFAULT_NOW)

    def test_non_utf8_body_rejected(self, context, db):
        with pytest.raises(SignatureError):
            handle_webhook(context.billing, db, b"\xff\xfe{}", sign("{}"), DEFAULT_NOW)
        assert db.get(User, "user-1") is None

    def test_missing_metadata(self, context, db):
        payload = event("checkout.session.completed", {**CHECKOUT, "metadata": {}})
        with pytest.raises(ValidationError):
            handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW)

    def test_subscription_deleted(self, context, db, make_premium):
        user = make_premium()
        user.premium_plan = PremiumPlan.monthly
        user.stripe_subscription_id = "sub_1"
        db.commit()

        payload = event("customer.subscription.deleted", {"id": "sub_1", "metadata": {"userId": "user-1"}})
        handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW)

        db.expire_all()
        user = db.get(User, "user-1")
        assert user.is_premium is False
        assert user.premium_plan is None
        assert user.stripe_subscription_id is None

    def test_subscription_deleted_found_by_subscription_id(self, context, db, make_premium):
        user = make_premium()
        user.stripe_subscription_id = "sub_9"
        db.commit()

        payload = event("customer.subscription.deleted", {"id": "sub_9", "metadata": {}})
        handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW)

        db.expire_all()
        assert db.get(User, "user-1").is_premium is False

    def test_subscription_updated(self, context, db, make_premium):
        make_premium()
        period_end = 1776211200  # 2026-04-15 00:00 UTC
        payload = event("customer.subscription.updated", {
            "id": "sub_1", "status": "past_due", "current_period_end": period_end,
            "metadata": {"userId": "user-1"},
        })
        handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW)

        db.expire_all()
        user = db.get(User, "user-1")
        assert user.is_premium is False
        assert user.next_billing_date == datetime(2026, 4, 15)

    def test_unhandled_event_acknowledged(self, context, db):
        payload = event("invoice.paid", {"id": "in_1"})
        assert handle_webhook(context.billing, db, payload.encode(), sign(payload), DEFAULT_NOW) == {"received": True}


class TestCheckoutSession:
    def test_creates_subscription_session(self, context, monkeypatch):
        create = MagicMock(return_value=SimpleNamespace(id="cs_test_1"))
        monkeypatch.setattr(stripe.checkout.Session, "create", create)

        assert context.billing.create_checkout_session("user-1", "yearly", "me@example.com") == "cs_test_1"

        kwargs = create.call_args.kwargs
        assert kwargs["mode"] == "subscription"
        assert kwargs["line_items"] == [{"price": "price_yearly", "quantity": 1}]
        assert kwargs["metadata"] == {"userId": "user-1", "plan": "yearly"}
        assert kwargs["success_url"] == "https://planner.test/premium/success?session_id={CHECKOUT_SESSION_ID}"
        assert kwargs["cancel_url"] == "https://planner.test/premium"
        assert kwargs["api_key"] == "sk_test_123"

    def test_missing_price_id(self, settings):
        gateway = StripeGateway(settings.model_copy(update={"STRIPE_MONTHLY_PRICE_ID": ""}))
        with pytest.raises(BillingConfigError):
            gateway.create_checkout_session("user-1", "monthly", None)

    def test_unknown_plan(self, context):
        with pytest.raises(ValidationError):
            context.billing.create_checkout_session("user-1", "weekly", None)
