# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status  # ✅ For raising clean auth errors

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30  # 30 days
CRON_ROLE = "cron"

# ✅ Function to create a signed JWT token
def create_access_token(data: dict, secret_key: str, expires_delta: Optional[timedelta] = None) -> str:
    if not secret_key:
        raise RuntimeError("JWT_SECRET_KEY environment variable is not set.")
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)

# ✅ Token for the scheduler / external cron caller
def create_cron_token(secret_key: str, expires_delta: Optional[timedelta] = None) -> str:
    return create_access_token({"sub": "scheduler", "role": CRON_ROLE}, secret_key, expires_delta)

# ✅ Function to verify and decode a JWT token
def verify_access_token(token: str, secret_key: str) -> dict:
    if not secret_key:
        raise HTTPException(status_code=500, detail="JWT_SECRET_KEY is not configured")
    try:
        return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
