# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from dayplanner.context import PlannerContext, get_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Infra"])


@router.get("/healthz")
def health_check(context: PlannerContext = Depends(get_context)):
    settings = context.settings
    result = {
        "db_connection": False,
        "email_configured": bool(settings.EMAIL_USER and settings.EMAIL_PASSWORD),
        "sms_configured": bool(settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN),
        "push_configured": bool(settings.VAPID_PRIVATE_KEY),
    }

    db = context.session_factory()
    try:
        # ✅ Check DB read
        db.execute(text("SELECT 1"))
        result["db_connection"] = True
    except SQLAlchemyError as e:
        logger.error(f"❌ Health check DB failure: {e}")
        return {"status": "error", "error": str(e), "details": result}
    finally:
        db.close()

    return {
        "status": "ok" if all(result.values()) else "partial",
        "details": result,
    }
