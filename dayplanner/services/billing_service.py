# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import calendar
import json
import logging
from datetime import datetime, timezone
from typing import Optional

import stripe
from sqlalchemy.orm import Session

from dayplanner.models.user import PremiumPlan, User
from dayplanner.utils.errors import PlannerError, SignatureError, ValidationError
from dayplanner.utils.tier_logic import get_or_create_user

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


class BillingConfigError(PlannerError):
    status_code = 500


def add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _parse_plan(plan: str) -> PremiumPlan:
    try:
        return PremiumPlan(plan)
    except ValueError:
        raise ValidationError(f"Unknown plan: {plan}")


class StripeGateway:
    """
    Stripe calls used by the planner. The api key is passed per call so
    nothing touches the module-global stripe config.
    """

    def __init__(self, settings):
        self.secret_key = settings.STRIPE_SECRET_KEY
        self.webhook_secret = settings.STRIPE_WEBHOOK_SECRET
        self.price_ids = {
            PremiumPlan.monthly: settings.STRIPE_MONTHLY_PRICE_ID,
            PremiumPlan.yearly: settings.STRIPE_YEARLY_PRICE_ID,
        }
        self.app_url = settings.APP_URL.rstrip("/")

    def create_checkout_session(self, user_id: str, plan: str, email: Optional[str]) -> str:
        premium_plan = _parse_plan(plan)
        price_id = self.price_ids.get(premium_plan)
        if not price_id:
            raise BillingConfigError(f"Missing price ID for {plan} plan")
        if not self.secret_key:
            raise BillingConfigError("Stripe is not configured")

        session = stripe.checkout.Session.create(
            api_key=self.secret_key,
            mode="subscription",
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=f"{self.app_url}/premium/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.app_url}/premium",
            customer_email=email,
            metadata={"userId": user_id, "plan": premium_plan.value},
            allow_promotion_codes=True,
            billing_address_collection="required",
        )
        session_id = getattr(session, "id", None)
        if not session_id:
            raise BillingConfigError("Failed to create checkout session")

        logger.info(f"💳 Checkout session {session_id} created for user {user_id} ({plan})")
        return session_id

    def verify(self, payload: bytes, signature: Optional[str]) -> dict:
        """
        Check the Stripe-Signature header and return the decoded event.
        Raises SignatureError before anything is parsed on mismatch.
        """
        if not self.webhook_secret:
            raise BillingConfigError("Webhook secret is not configured")
        if not signature:
            raise SignatureError("Missing stripe-signature header")

        try:
            text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        except UnicodeDecodeError:
            raise SignatureError("Webhook Error: payload is not valid UTF-8")
        try:
            stripe.WebhookSignature.verify_header(
                text, signature, self.webhook_secret, WEBHOOK_TOLERANCE_SECONDS
            )
        except stripe.SignatureVerificationError as e:
            raise SignatureError(f"Webhook Error: {e}")

        try:
            return json.loads(text)
        except ValueError:
            raise ValidationError("Webhook payload is not valid JSON")


def _to_naive_utc(ts: int) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc).replace(tzinfo=None)


def _subscription_owner(db: Session, subscription: dict) -> Optional[User]:
    user_id = (subscription.get("metadata") or {}).get("userId")
    if user_id:
        return db.query(User).filter(User.id == user_id).first()
    if subscription.get("id"):
        return db.query(User).filter(User.stripe_subscription_id == subscription["id"]).first()
    return None


def _activate(db: Session, session: dict, now: datetime) -> None:
    metadata = session.get("metadata") or {}
    user_id, plan = metadata.get("userId"), metadata.get("plan")
    if not user_id or not plan:
        raise ValidationError("Missing userId or plan in session metadata")
    premium_plan = _parse_plan(plan)

    user = get_or_create_user(db, user_id, session.get("customer_email"))
    user.is_premium = True
    user.premium_plan = premium_plan
    user.premium_start_date = now
    user.next_billing_date = add_months(now, 12 if premium_plan == PremiumPlan.yearly else 1)
    user.stripe_customer_id = session.get("customer")
    user.stripe_subscription_id = session.get("subscription")
    logger.info(f"🌟 Premium activated for user {user_id} ({premium_plan.value})")


def _deactivate(db: Session, subscription: dict) -> None:
    user = _subscription_owner(db, subscription)
    if not user:
        logger.warning(f"⚠️ Subscription {subscription.get('id')} deleted for unknown user")
        return
    user.is_premium = False
    user.premium_plan = None
    user.premium_start_date = None
    user.next_billing_date = None
    user.stripe_subscription_id = None
    logger.info(f"🔻 Premium deactivated for user {user.id}")


def _refresh(db: Session, subscription: dict) -> None:
    user = _subscription_owner(db, subscription)
    if not user:
        logger.warning(f"⚠️ Subscription {subscription.get('id')} updated for unknown user")
        return
    period_end = subscription.get("current_period_end")
    if period_end:
        user.next_billing_date = _to_naive_utc(int(period_end))
    user.is_premium = subscription.get("status") == "active"
    logger.info(f"🔄 Subscription updated for user {user.id}: premium={user.is_premium}")


def handle_webhook(gateway: StripeGateway, db: Session, payload: bytes, signature: Optional[str], now: datetime) -> dict:
    event = gateway.verify(payload, signature)
    event_type = event.get("type")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type == "checkout.session.completed":
        _activate(db, obj, now.replace(tzinfo=None))
    elif event_type == "customer.subscription.deleted":
        _deactivate(db, obj)
    elif event_type == "customer.subscription.updated":
        _refresh(db, obj)
    else:
        logger.info(f"ℹ️ Unhandled webhook event type: {event_type}")
        return {"received": True}

    db.commit()
    return {"received": True}
