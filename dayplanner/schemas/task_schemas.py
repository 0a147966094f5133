# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel, field_validator
from typing import Optional, Literal

When = Literal["today", "tomorrow"]


class TaskCreateRequest(BaseModel):
    userId: str
    when: When = "today"
    startTime: float
    duration: float = 1
    activity: str
    description: Optional[str] = ""
    category: Optional[str] = None
    isPriority: bool = False

    @field_validator("activity")
    @classmethod
    def activity_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("activity is required")
        return v.strip()


class TaskUpdateRequest(BaseModel):
    userId: str
    startTime: Optional[float] = None
    duration: Optional[float] = None
    activity: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    isPriority: Optional[bool] = None
    completed: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude={"userId"}, exclude_none=True)


class TaskActionRequest(BaseModel):
    userId: str
