# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.schemas.preferences_schemas import (
    PreferencesUpdateRequest,
    PushSubscribeRequest,
    PushUnsubscribeRequest,
)
from dayplanner.services import preferences_service
from dayplanner.utils.auth_utils import ensure_token_user_match, require_token

router = APIRouter(tags=["Preferences"])


@router.get("/preferences/{user_id}")
def get_preferences(user_id: str, db: Session = Depends(get_db), user_data: dict = Depends(require_token)):
    ensure_token_user_match(user_data["sub"], user_id)
    return preferences_service.get_or_create_preferences(db, user_id, user_data.get("email")).to_dict()


@router.put("/preferences/{user_id}")
def update_preferences(
    user_id: str,
    payload: PreferencesUpdateRequest,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], user_id)
    changes = payload.model_dump(exclude_unset=True)
    return preferences_service.update_preferences(db, user_id, changes).to_dict()


# ---------------------------
# 🔔 Push subscription
# ---------------------------

@router.get("/push/public-key")
def vapid_public_key(context: PlannerContext = Depends(get_context)):
    # Browsers need the application server key to create a subscription
    return {"publicKey": context.settings.VAPID_PUBLIC_KEY}


@router.post("/push/subscribe")
def subscribe(payload: PushSubscribeRequest, db: Session = Depends(get_db), user_data: dict = Depends(require_token)):
    ensure_token_user_match(user_data["sub"], payload.userId)
    preferences_service.save_push_subscription(db, payload.userId, payload.subscription)
    return {"success": True}


@router.post("/push/unsubscribe")
def unsubscribe(payload: PushUnsubscribeRequest, db: Session = Depends(get_db), user_data: dict = Depends(require_token)):
    ensure_token_user_match(user_data["sub"], payload.userId)
    preferences_service.remove_push_subscription(db, payload.userId)
    return {"success": True}
