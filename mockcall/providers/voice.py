from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict

BENIGN_END_MARKER = "Meeting has ended"
DEFAULT_ERROR_MESSAGE = "An error occurred with the interview service"


@dataclass(frozen=True)
class BenignEnd:
    reason: str


@dataclass(frozen=True)
class FatalError:
    message: str


ProviderError = BenignEnd | FatalError


def _error_texts(error: Any) -> list[str]:
    if error is None:
        return []
    if isinstance(error, str):
        return [error]
    if isinstance(error, BaseException):
        return [str(error)]
    if isinstance(error, dict):
        texts = []
        for key in ("errorMsg", "message", "msg"):
            value = error.get(key)
            if isinstance(value, str) and value:
                texts.append(value)
        nested = error.get("error")
        if nested is not None and nested is not error:
            texts.extend(_error_texts(nested))
        return texts
    return [str(error)]


def classify_error(error: Any) -> ProviderError:
    """Decide once whether a provider error is a real failure.

    The provider reports a normal hang-up as "Meeting has ended" on its error
    channel, in several shapes.
    """
    texts = _error_texts(error)
    for text in texts:
        if BENIGN_END_MARKER in text:
            return BenignEnd(reason=text)
    return FatalError(message=texts[0] if texts else DEFAULT_ERROR_MESSAGE)


class VoiceProvider(ABC):
    """Handle on one voice session, owned by the controller that opened it."""

    @abstractmethod
    async def start(self, target: str, options: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def stop(self) -> None:
        pass

    async def release(self) -> None:
        pass


class RelayVoiceProvider(VoiceProvider):
    """Drives the browser voice SDK over the session websocket.

    Commands go out as ``voice.start`` / ``voice.stop`` messages; the browser
    runs the call and relays the SDK events back to the controller.
    """

    def __init__(self, send_json: Callable[[Dict[str, Any]], Awaitable[None]]):
        self._send_json = send_json
        self._released = False

    async def start(self, target: str, options: Dict[str, Any]) -> None:
        if self._released:
            raise RuntimeError("Voice session handle has been released")
        await self._send_json({"type": "voice.start", "target": target, "options": options})

    async def stop(self) -> None:
        if self._released:
            return
        await self._send_json({"type": "voice.stop"})

    async def release(self) -> None:
        self._released = True
