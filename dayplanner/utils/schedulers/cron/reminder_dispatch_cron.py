# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from dayplanner.services.reminder_dispatcher import run_reminder_dispatch

logger = logging.getLogger(__name__)


def reminder_dispatch_cron(context):
    """Every minute. BackgroundScheduler threads have no event loop, so open one per run."""
    try:
        run_reminder_dispatch(context)
    except Exception as e:
        logger.error(f"❌ Reminder dispatch job crashed: {e}", exc_info=True)
