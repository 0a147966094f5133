# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from fastapi import Request
from jose import JWTError, jwt
from slowapi import Limiter
from slowapi.util import get_remote_address

SUGGESTION_RATE = "10/minute"


def user_or_ip(request: Request) -> str:
    # Signature is checked later by require_token; here the sub only picks a bucket
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        try:
            sub = jwt.get_unverified_claims(auth_header[len("Bearer "):]).get("sub")
        except JWTError:
            sub = None
        if sub:
            return f"user:{sub}"
    return get_remote_address(request)


limiter = Limiter(key_func=user_or_ip)
