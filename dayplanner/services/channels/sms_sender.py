# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import logging

from twilio.rest import Client

from dayplanner.services.channels.base import ChannelResult, failure
from dayplanner.utils.time_buckets import format_hour

logger = logging.getLogger(__name__)

MAX_SMS_LENGTH = 1600


class SmsSender:
    channel = "sms"

    def __init__(self, settings):
        self.account_sid = settings.TWILIO_ACCOUNT_SID
        self.auth_token = settings.TWILIO_AUTH_TOKEN
        self.from_number = settings.TWILIO_PHONE_NUMBER
        self._client = None

    @property
    def client(self) -> Client:
        # Built on first use so a missing Twilio account only fails SMS sends
        if self._client is None:
            if not self.account_sid or not self.auth_token or not self.from_number:
                raise RuntimeError("Twilio account is not configured")
            self._client = Client(self.account_sid, self.auth_token)
        return self._client

    def _deliver(self, to: str, body: str) -> str:
        if len(body) > MAX_SMS_LENGTH:
            body = body[: MAX_SMS_LENGTH - 3] + "..."
        message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        return message.sid

    async def send_message(self, to: str, body: str) -> ChannelResult:
        try:
            sid = await asyncio.to_thread(self._deliver, to, body)
        except Exception as e:
            logger.error(f"📱 SMS to {to} failed: {e}")
            return failure(self.channel, to, e)

        logger.info(f"📱 SMS sent to {to} (sid={sid})")
        return ChannelResult(success=True, type=self.channel, recipient=to)

    async def send(self, task, destination: str) -> ChannelResult:
        body = f'Reminder: "{task.activity}" starts soon at {format_hour(task.start_time)}'
        return await self.send_message(destination, body)
