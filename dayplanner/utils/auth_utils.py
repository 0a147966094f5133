# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import HTTPException, Header, Depends
from typing import Optional, Union
from dayplanner.context import PlannerContext, get_context
from dayplanner.utils.jwt_utils import verify_access_token, CRON_ROLE

# ✅ Token-user matching guard
def ensure_token_user_match(token_sub: str, input_id: Union[str, int]):
    if str(token_sub) != str(input_id):
        raise HTTPException(status_code=401, detail="Token/user mismatch")


# ✅ Dependency to extract token payload
def require_token(
    authorization: Optional[str] = Header(None),
    context: PlannerContext = Depends(get_context),
) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization format")
    token = authorization[len("Bearer "):]
    return verify_access_token(token, context.settings.JWT_SECRET_KEY)


# ✅ Scheduler-only routes (rollover / dispatch triggers)
def require_cron_token(user_data: dict = Depends(require_token)) -> dict:
    if user_data.get("role") != CRON_ROLE:
        raise HTTPException(status_code=401, detail="Scheduler token required")
    return user_data


def is_cron_token(user_data: dict) -> bool:
    return user_data.get("role") == CRON_ROLE
