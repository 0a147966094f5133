# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import os
from pydantic import BaseModel

# ✅ Only load .env in local/dev
if os.environ.get("ENV") != "production":
    from dotenv import load_dotenv
    load_dotenv()


class Settings(BaseModel):
    """
    Everything the planner reads from the environment.
    Built once by build_context() and handed to whoever needs it.
    """

    DATABASE_URL: str = "sqlite:///./dayplanner.db"

    # 🔐 Auth
    JWT_SECRET_KEY: str = ""
    FERNET_SECRET: str = ""

    # 💳 Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_MONTHLY_PRICE_ID: str = ""
    STRIPE_YEARLY_PRICE_ID: str = ""
    APP_URL: str = "http://localhost:3000"

    # 🤖 Completion API (OpenAI-compatible chat endpoint)
    LLM_API_URL: str = "https://api.openai.com/v1/chat/completions"
    LLM_API_KEY: str = ""
    LLM_MODEL: str = "gpt-4o-mini"

    # 📧 Email
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    EMAIL_USER: str = ""
    EMAIL_PASSWORD: str = ""
    EMAIL_SENDER_NAME: str = "Task Manager"

    # 📱 SMS
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # 🔔 Web push
    VAPID_PUBLIC_KEY: str = ""
    VAPID_PRIVATE_KEY: str = ""
    VAPID_EMAIL: str = ""

    SCHEDULER_ENABLED: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(name)
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)

