from typing import Any, Dict, List, Tuple
from unittest.mock import MagicMock

from mockcall.providers.voice import VoiceProvider


class FakeVoiceProvider(VoiceProvider):
    def __init__(self, start_error: Exception | None = None, stop_error: Exception | None = None):
        self.start_error = start_error
        self.stop_error = stop_error
        self.started: List[Tuple[str, Dict[str, Any]]] = []
        self.stop_calls = 0
        self.released = False

    async def start(self, target: str, options: Dict[str, Any]) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.started.append((target, options))

    async def stop(self) -> None:
        self.stop_calls += 1
        if self.stop_error is not None:
            raise self.stop_error

    async def release(self) -> None:
        self.released = True


def completion(content: str, prompt_tokens: int = 10, completion_tokens: int = 5) -> MagicMock:
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    response.choices = [choice]
    response.usage.prompt_tokens = prompt_tokens
    response.usage.completion_tokens = completion_tokens
    return response


def transcript_event(role: str, text: str, transcript_type: str = "final") -> Dict[str, Any]:
    return {
        "event": "message",
        "message": {
            "type": "transcript",
            "transcriptType": transcript_type,
            "role": role,
            "transcript": text,
        },
    }
