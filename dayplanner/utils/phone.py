# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import re

from dayplanner.utils.errors import ValidationError


def format_phone_number(number: str) -> str:
    """Normalise to E.164; bare 10-digit numbers are treated as US."""
    digits = re.sub(r"\D", "", number or "")
    if len(digits) < 10 or len(digits) > 15:
        raise ValidationError("Invalid phone number")
    if len(digits) == 10:
        return f"+1{digits}"
    return f"+{digits}"
