# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import json
import logging
from datetime import datetime, timezone

from pywebpush import webpush, WebPushException

from dayplanner.services.channels.base import ChannelResult, SUBSCRIPTION_INVALID, failure

logger = logging.getLogger(__name__)

# Push service answers for a subscription that no longer exists
GONE_STATUS_CODES = (404, 410)


class PushSender:
    channel = "push"

    def __init__(self, settings):
        self.private_key = settings.VAPID_PRIVATE_KEY
        self.contact = settings.VAPID_EMAIL

    def _deliver(self, subscription: dict, payload: dict) -> None:
        if not self.private_key:
            raise RuntimeError("VAPID keys are not configured")
        webpush(
            subscription_info=subscription,
            data=json.dumps(payload),
            vapid_private_key=self.private_key,
            vapid_claims={"sub": f"mailto:{self.contact}"},
        )

    async def send_message(self, subscription: dict, title: str, body: str) -> ChannelResult:
        endpoint = (subscription or {}).get("endpoint")
        payload = {
            "title": title,
            "body": body,
            "icon": "/icon.png",
            "badge": "/badge.png",
            "data": {
                "url": "/",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "type": "task-reminder",
            },
        }
        try:
            await asyncio.to_thread(self._deliver, subscription, payload)
        except WebPushException as e:
            status = getattr(e.response, "status_code", None)
            if status in GONE_STATUS_CODES:
                logger.warning(f"🔕 Push subscription gone ({status}): {endpoint}")
                return ChannelResult(
                    success=False,
                    type=self.channel,
                    recipient=endpoint,
                    error=SUBSCRIPTION_INVALID,
                    permanent=True,
                )
            logger.error(f"🔔 Push to {endpoint} failed: {e}")
            return failure(self.channel, endpoint, e)
        except Exception as e:
            logger.error(f"🔔 Push to {endpoint} failed: {e}")
            return failure(self.channel, endpoint, e)

        logger.info(f"🔔 Push sent to {endpoint}")
        return ChannelResult(success=True, type=self.channel, recipient=endpoint)

    async def send(self, task, destination: dict) -> ChannelResult:
        title = f"Reminder: {task.activity} starts soon"
        body = task.description or f'Your task "{task.activity}" is starting soon.'
        return await self.send_message(destination, title, body)
