# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.

import logging
import requests

# ---------------------------
# ✅ Logger Setup
# ---------------------------

logger = logging.getLogger(__name__)


class CompletionError(Exception):
    pass


class CompletionClient:
    """
    Thin wrapper around an OpenAI-compatible chat-completions endpoint.
    Keeps suggestion logic abstracted from the model provider.
    """

    def __init__(self, settings, timeout: int = 30):
        self.url = settings.LLM_API_URL
        self.api_key = settings.LLM_API_KEY
        self.model = settings.LLM_MODEL
        self.timeout = timeout

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def complete_json(self, prompt: str, temperature: float = 0.7) -> str:
        """
        Send a prompt and return the raw message content.
        Raises CompletionError on any transport or format problem.
        """
        if not self.url or not self.api_key:
            raise CompletionError("Completion API is not configured")

        body = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "response_format": {"type": "json_object"},
            "temperature": temperature,
        }

        try:
            logger.info(f"🔁 Sending prompt to completion API: {self.url}")
            response = requests.post(self.url, headers=self._headers(), json=body, timeout=self.timeout)
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            raise CompletionError(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise CompletionError("Completion API returned non-JSON body") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.warning("⚠️ Unexpected completion response format: %s", result)
            raise CompletionError("Unexpected completion response format") from e

        if not content:
            raise CompletionError("Empty response from completion API")
        return content
