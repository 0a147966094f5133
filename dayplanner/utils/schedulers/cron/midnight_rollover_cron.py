# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from dayplanner.services.rollover_service import run_midnight_rollover

logger = logging.getLogger(__name__)


def midnight_rollover_cron(context):
    # Runs every 15 minutes; each user is gated on their own local midnight
    try:
        run_midnight_rollover(context)
    except Exception as e:
        logger.error(f"❌ Midnight rollover job crashed: {e}", exc_info=True)
