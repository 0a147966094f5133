"""In-memory stand-ins for the outbound providers."""

from typing import Optional

from dayplanner.services.channels.base import ChannelResult
from dayplanner.utils.ai_engine import CompletionError


def _recipient(destination):
    return destination.get("endpoint") if isinstance(destination, dict) else destination


class FakeSender:
    def __init__(self, channel: str, result: Optional[ChannelResult] = None, exc: Optional[Exception] = None):
        self.channel = channel
        self.result = result
        self.exc = exc
        self.calls = []
        self.messages = []

    async def send(self, task, destination) -> ChannelResult:
        self.calls.append((task.id, destination))
        if self.exc:
            raise self.exc
        if self.result:
            return self.result
        return ChannelResult(success=True, type=self.channel, recipient=_recipient(destination))

    async def send_message(self, destination, *args) -> ChannelResult:
        self.messages.append((destination, *args))
        if self.result:
            return self.result
        return ChannelResult(success=True, type=self.channel, recipient=_recipient(destination))


class FakeCompletion:
    def __init__(self, response: Optional[str] = None, exc: Optional[Exception] = None):
        self.response = response
        self.exc = exc
        self.prompts = []

    def complete_json(self, prompt: str, temperature: float = 0.7) -> str:
        self.prompts.append(prompt)
        if self.exc:
            raise self.exc
        if self.response is None:
            raise CompletionError("Completion API is not configured")
        return self.response


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now
