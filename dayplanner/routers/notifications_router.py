# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.models.notification import NotificationAttempt
from dayplanner.schemas.notification_schemas import SendEmailRequest, SendSmsRequest
from dayplanner.services.reminder_dispatcher import run_reminder_dispatch
from dayplanner.utils.auth_utils import ensure_token_user_match, require_cron_token, require_token
from dayplanner.utils.phone import format_phone_number
from dayplanner.utils.tier_logic import ensure_premium

router = APIRouter(tags=["Notifications"])


@router.post("/send-email")
async def send_email(
    payload: SendEmailRequest,
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    if not payload.has_valid_address():
        raise HTTPException(status_code=400, detail="Invalid email address")
    result = await context.email.send_message(payload.to.strip(), payload.subject, payload.text or "", payload.html)
    if not result.success:
        raise HTTPException(status_code=500, detail=f"Failed to send email: {result.error}")
    return {"success": True}


@router.post("/send-sms")
async def send_sms(
    payload: SendSmsRequest,
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    if not payload.message.strip():
        raise HTTPException(status_code=400, detail="Phone number, message, and userId are required")
    ensure_premium(db, payload.userId, "SMS notifications")

    result = await context.sms.send_message(format_phone_number(payload.to), payload.message)
    if not result.success:
        raise HTTPException(status_code=500, detail="Failed to send SMS")
    return {"success": True}


# ---------------------------
# ⏰ Reminder dispatch trigger
# ---------------------------

@router.get("/notifications")
@router.post("/notifications")
def run_notifications(
    context: PlannerContext = Depends(get_context),
    cron: dict = Depends(require_cron_token),
):
    sent = run_reminder_dispatch(context)
    return {"success": True, "notificationsSent": len(sent), "details": sent}


@router.get("/notifications/history/{user_id}")
def notification_history(
    user_id: str,
    limit: int = 20,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], user_id)
    attempts = (
        db.query(NotificationAttempt)
        .filter(NotificationAttempt.user_id == user_id)
        .order_by(NotificationAttempt.timestamp.desc())
        .limit(max(1, min(limit, 100)))
        .all()
    )
    return {"history": [a.to_dict() for a in attempts]}
