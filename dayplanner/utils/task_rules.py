# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

from typing import Iterable, Optional

from dayplanner.utils.errors import TaskValidationError

MAX_PRIORITY_TASKS = 3
SLOT_HOURS = 0.25  # 15 minutes
LAST_SLOT = 23.75


def _on_grid(value: float) -> bool:
    return abs(value / SLOT_HOURS - round(value / SLOT_HOURS)) < 1e-9


def validate_slot(start_time: float, duration: float) -> None:
    if start_time < 0 or start_time > LAST_SLOT or not _on_grid(start_time):
        raise TaskValidationError("startTime must be between 0 and 23.75 in 15-minute steps")
    if duration <= 0 or not _on_grid(duration):
        raise TaskValidationError("duration must be a positive multiple of 15 minutes")
    if start_time + duration > 24:
        raise TaskValidationError("Task must end by midnight")


def overlaps(start_a: float, duration_a: float, start_b: float, duration_b: float) -> bool:
    """Half-open interval check: [a, a+da) vs [b, b+db)."""
    return start_a < start_b + duration_b and start_b < start_a + duration_a


def find_overlap(start_time: float, duration: float, others: Iterable, ignore_id: Optional[str] = None):
    for other in others:
        if ignore_id is not None and other.id == ignore_id:
            continue
        if overlaps(start_time, duration, other.start_time, other.duration):
            return other
    return None


def ensure_no_overlap(start_time: float, duration: float, others: Iterable, ignore_id: Optional[str] = None) -> None:
    clash = find_overlap(start_time, duration, others, ignore_id)
    if clash is not None:
        raise TaskValidationError(
            f"Time slot overlaps with existing task '{clash.activity or clash.id}'"
        )


def ensure_priority_capacity(others: Iterable, ignore_id: Optional[str] = None) -> None:
    count = sum(1 for t in others if t.is_priority and t.id != ignore_id)
    if count >= MAX_PRIORITY_TASKS:
        raise TaskValidationError(f"You can only have up to {MAX_PRIORITY_TASKS} priority tasks per day")
