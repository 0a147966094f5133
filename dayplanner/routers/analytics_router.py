# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.services.analytics_service import run_weekly_analytics_emails, user_analytics
from dayplanner.services.preferences_service import get_preferences
from dayplanner.utils.auth_utils import ensure_token_user_match, is_cron_token, require_token
from dayplanner.utils.tier_logic import ensure_premium

router = APIRouter(tags=["Analytics"])


@router.get("/analytics/{user_id}")
def get_analytics(
    user_id: str,
    days: int = 30,
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], user_id)
    ensure_premium(db, user_id, "Analytics")
    if not 1 <= days <= 365:
        raise HTTPException(status_code=400, detail="days must be between 1 and 365")
    return user_analytics(db, user_id, context.now(), days)


@router.get("/weekly-analytics-email")
def weekly_analytics_email(
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    if is_cron_token(user_data):
        results = run_weekly_analytics_emails(context)
        return {"success": True, "results": results}

    user_id = user_data.get("sub")
    prefs = get_preferences(db, user_id)
    if not prefs or not prefs.email or not prefs.email_reminders:
        raise HTTPException(status_code=400, detail="User has not enabled email reminders")

    results = run_weekly_analytics_emails(context, user_id=user_id)
    return {"success": True, "result": results[0] if results else None}
