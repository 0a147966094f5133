# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional
from sqlalchemy.orm import Session
from dayplanner.models.user import User
from dayplanner.utils.errors import PremiumRequiredError


def get_or_create_user(db: Session, user_id: str, email: Optional[str] = None) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        user = User(id=user_id, email=email, is_premium=False)
        db.add(user)
        db.flush()
    elif email and not user.email:
        user.email = email
    return user


def is_premium_user(db: Session, user_id: str) -> bool:
    user = db.query(User).filter(User.id == user_id).first()
    return bool(user and user.is_premium)


def ensure_premium(db: Session, user_id: str, feature: str = "This feature") -> None:
    """
    Raises PremiumRequiredError unless the user has an active premium plan.
    """
    if not is_premium_user(db, user_id):
        raise PremiumRequiredError(f"{feature} is a premium feature")
