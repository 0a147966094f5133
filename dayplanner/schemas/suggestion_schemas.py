# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from pydantic import BaseModel
from typing import Literal


class GenerateSuggestionsRequest(BaseModel):
    userId: str
    day: str  # weekday name, e.g. "monday"
    todayOrTomorrow: Literal["today", "tomorrow"] = "today"


class SuggestionActionRequest(BaseModel):
    userId: str
    when: Literal["today", "tomorrow"] = "today"
