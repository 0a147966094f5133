# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.schemas.billing_schemas import CheckoutRequest
from dayplanner.services.billing_service import handle_webhook
from dayplanner.utils.auth_utils import ensure_token_user_match, require_token

router = APIRouter(tags=["Billing"])


@router.post("/create-checkout-session")
def create_checkout_session(
    payload: CheckoutRequest,
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    session_id = context.billing.create_checkout_session(payload.userId, payload.plan, payload.email)
    return {"sessionId": session_id}


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
):
    # Raw bytes: the signature covers the exact body
    payload = await request.body()
    return await run_in_threadpool(handle_webhook, context.billing, db, payload, stripe_signature, context.now())
