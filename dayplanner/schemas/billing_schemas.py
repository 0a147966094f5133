# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel
from typing import Optional, Literal


class CheckoutRequest(BaseModel):
    userId: str
    plan: Literal["monthly", "yearly"]
    email: Optional[str] = None
