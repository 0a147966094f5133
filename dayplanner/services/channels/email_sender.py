# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from dayplanner.services.channels.base import ChannelResult, failure, reminder_text
from dayplanner.utils.time_buckets import format_hour

logger = logging.getLogger(__name__)


class EmailSender:
    channel = "email"

    def __init__(self, settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.EMAIL_USER
        self.password = settings.EMAIL_PASSWORD
        self.sender_name = settings.EMAIL_SENDER_NAME

    def _deliver(self, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        if not self.user or not self.password:
            raise RuntimeError("Email account credentials are not configured")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f'"{self.sender_name}" <{self.user}>'
        msg["To"] = to
        msg.attach(MIMEText(text or "", "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))

        with smtplib.SMTP(self.host, self.port) as server:
            server.starttls()
            server.login(self.user, self.password)
            server.send_message(msg)

    async def send_message(self, to: str, subject: str, text: str = "", html: Optional[str] = None) -> ChannelResult:
        try:
            await asyncio.to_thread(self._deliver, to, subject, text, html)
        except Exception as e:
            logger.error(f"📧 Email to {to} failed: {e}")
            return failure(self.channel, to, e)

        logger.info(f"📧 Email sent to {to}")
        return ChannelResult(success=True, type=self.channel, recipient=to)

    async def send(self, task, destination: str) -> ChannelResult:
        subject = f"Reminder: {task.activity}"
        body = (
            "<h2>Task Reminder</h2>"
            f"<p>Your task &quot;{html.escape(task.activity)}&quot; is starting soon.</p>"
            f"<p><strong>Time:</strong> {format_hour(task.start_time)}</p>"
        )
        if task.description:
            body += f"<p><strong>Description:</strong> {html.escape(task.description)}</p>"
        return await self.send_message(destination, subject, reminder_text(task), body)
