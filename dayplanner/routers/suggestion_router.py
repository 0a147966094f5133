# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from dayplanner.context import PlannerContext, get_context, get_db
from dayplanner.schemas.suggestion_schemas import GenerateSuggestionsRequest, SuggestionActionRequest
from dayplanner.services import suggestion_service
from dayplanner.utils.auth_utils import ensure_token_user_match, require_token
from dayplanner.utils.rate_limit_utils import SUGGESTION_RATE, limiter
from dayplanner.utils.tier_logic import ensure_premium

router = APIRouter(tags=["Suggestions"])


@router.post("/generate-suggestions")
@limiter.limit(SUGGESTION_RATE)
def generate_suggestions(
    request: Request,
    payload: GenerateSuggestionsRequest,
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    ensure_premium(db, payload.userId, "AI suggestions")

    day = payload.day.strip().lower()
    suggestions = suggestion_service.generate_suggestions(db, context.completion, payload.userId, day)
    return {"suggestions": suggestions, "todayOrTomorrow": payload.todayOrTomorrow}


@router.post("/suggestions/{suggestion_id}/accept", status_code=201)
def accept_suggestion(
    suggestion_id: str,
    payload: SuggestionActionRequest,
    db: Session = Depends(get_db),
    context: PlannerContext = Depends(get_context),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    task = suggestion_service.accept_suggestion(db, payload.userId, suggestion_id, payload.when, context.now())
    return task.to_dict()


@router.post("/suggestions/{suggestion_id}/dismiss")
def dismiss_suggestion(
    suggestion_id: str,
    payload: SuggestionActionRequest,
    db: Session = Depends(get_db),
    user_data: dict = Depends(require_token),
):
    ensure_token_user_match(user_data["sub"], payload.userId)
    suggestion_service.dismiss_suggestion(db, payload.userId, suggestion_id)
    return {"status": "dismissed", "id": suggestion_id}
