# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from dayplanner.services.analytics_service import run_weekly_analytics_emails

logger = logging.getLogger(__name__)


def weekly_analytics_cron(context):
    try:
        results = run_weekly_analytics_emails(context)
        sent = sum(1 for r in results if r.get("success"))
        logger.info(f"📊 Weekly analytics: {sent}/{len(results)} emails sent")
    except Exception as e:
        logger.error(f"❌ Weekly analytics job crashed: {e}", exc_info=True)
