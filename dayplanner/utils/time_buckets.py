# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

"""
Pure date/time helpers shared by the rollover job and the reminder dispatcher.

Nothing in here reads the clock: callers pass `now` (an aware UTC datetime)
so every decision can be unit tested without timers.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

import pytz

logger = logging.getLogger(__name__)

ROLLOVER_WINDOW_MINUTES = 5
DEFAULT_REMINDER_MINUTES = 10
DAY_FORMAT = "%Y-%m-%d"

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def get_zone(tz_name: Optional[str]):
    if not tz_name:
        return pytz.utc
    try:
        return pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        logger.warning(f"⚠️ Unknown timezone {tz_name!r}, falling back to UTC")
        return pytz.utc


def is_valid_timezone(tz_name: str) -> bool:
    return tz_name in pytz.all_timezones_set


def utc_now() -> datetime:
    return datetime.now(pytz.utc)


def local_now(now: datetime, tz_name: Optional[str]) -> datetime:
    if now.tzinfo is None:
        now = pytz.utc.localize(now)
    return now.astimezone(get_zone(tz_name))


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_day(day: str) -> date:
    return datetime.strptime(day, DAY_FORMAT).date()


def weekday_name(day: Union[str, date]) -> str:
    if isinstance(day, str):
        day = parse_day(day)
    return WEEKDAYS[day.weekday()]


def local_day_bounds(now: datetime, tz_name: Optional[str]) -> Tuple[str, str, str]:
    """(yesterday, today, tomorrow) as calendar days in the user's zone."""
    today = local_now(now, tz_name).date()
    return (
        format_day(today - timedelta(days=1)),
        format_day(today),
        format_day(today + timedelta(days=1)),
    )


def resolve_day(now: datetime, tz_name: Optional[str], when: str) -> str:
    _, today, tomorrow = local_day_bounds(now, tz_name)
    if when == "today":
        return today
    if when == "tomorrow":
        return tomorrow
    raise ValueError(f"Unknown day {when!r}, expected 'today' or 'tomorrow'")


def should_run_rollover(now: datetime, tz_name: Optional[str]) -> bool:
    """Midnight gate: local hour 0, minute 0-5 inclusive."""
    local = local_now(now, tz_name)
    return local.hour == 0 and 0 <= local.minute <= ROLLOVER_WINDOW_MINUTES


def reminder_target(start_time: float, lead_minutes: Optional[int]) -> Optional[Tuple[int, int]]:
    """
    Clock time (hour, minute) at which a task starting at `start_time` should
    be announced, `lead_minutes` ahead. Returns None when that moment falls on
    the previous day.
    """
    lead = int(lead_minutes or DEFAULT_REMINDER_MINUTES)
    target = int(round(start_time * 60)) - lead
    if target < 0:
        return None
    hour, minute = divmod(target, 60)
    return hour, minute


def is_reminder_due(local: datetime, target: Optional[Tuple[int, int]]) -> bool:
    return target is not None and (local.hour, local.minute) == target


def format_hour(start_time: float) -> str:
    """9.5 -> '9:30 AM'"""
    total = int(round(start_time * 60))
    hour, minute = divmod(total, 60)
    period = "PM" if 12 <= hour < 24 else "AM"
    display = hour % 12 or 12
    return f"{display}:{minute:02d} {period}"
