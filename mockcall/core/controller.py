from typing import Any, Awaitable, Callable, Dict, List, Tuple

from mockcall.config.settings import settings
from mockcall.core.extractor import extract_parameters
from mockcall.core.models import CallPurpose, CallStatus
from mockcall.core.session import CallSession
from mockcall.providers.voice import BenignEnd, VoiceProvider, classify_error
from mockcall.utils.logger import CallLogger

Observer = Callable[[str, Dict[str, Any]], Awaitable[None]]


class CallController:
    """Relays voice provider events into a ``CallSession``.

    Lifecycle: INACTIVE -> CONNECTING -> ACTIVE -> FINISHED. A failed start or
    a real provider error drops the session back to INACTIVE; the only way
    forward from there is a new ``start``.
    """

    def __init__(
        self,
        provider: VoiceProvider,
        session: CallSession,
        logger: CallLogger | None = None,
        workflow_id: str | None = None,
        interviewer_id: str | None = None,
    ):
        self.provider = provider
        self.session = session
        self.logger = logger or CallLogger(session_id=session.session_id or None)
        self.workflow_id = workflow_id if workflow_id is not None else settings.VOICE_WORKFLOW_ID
        self.interviewer_id = interviewer_id if interviewer_id is not None else settings.VOICE_INTERVIEWER_ID
        self._observers: List[Observer] = []
        self._handlers = {
            "call-start": self._on_call_start,
            "call-end": self._on_call_end,
            "message": self._on_message,
            "speech-start": self._on_speech_start,
            "speech-end": self._on_speech_end,
            "error": self._on_error,
        }

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    async def _emit(self, kind: str, payload: Dict[str, Any]) -> None:
        for observer in list(self._observers):
            await observer(kind, payload)

    async def _set_status(self, status: CallStatus, reason: str = "") -> None:
        previous = self.session.status
        self.session.status = status
        if previous != status:
            self.logger.log_state_transition(previous.value, status.value, reason)
        await self._emit("status", {"status": status.value})

    def _start_request(self) -> Tuple[str, Dict[str, Any]]:
        session = self.session
        if session.purpose == CallPurpose.GENERATE:
            if not session.user_name or not session.user_id:
                raise ValueError("A user name and id are required to generate an interview")
            variables = {"username": session.user_name, "userid": session.user_id}
            target = self.workflow_id
        else:
            variables = {"questions": "\n".join(f"- {q}" for q in session.questions)}
            target = self.interviewer_id

        return target, {
            "variableValues": variables,
            "clientMessages": [],
            "serverMessages": [],
        }

    async def start(self) -> None:
        self.session.error = None
        await self._set_status(CallStatus.CONNECTING, f"{self.session.purpose.value} call requested")

        try:
            target, options = self._start_request()
            self.logger.log("Provider", f"Starting voice session on {target or '<unset>'}",
                            {"purpose": self.session.purpose.value})
            await self.provider.start(target, options)
        except Exception as e:
            self.logger.error("Provider", f"Failed to start voice session: {e}")
            await self._handle_error(e)
            await self._set_status(CallStatus.INACTIVE, "voice session failed to start")

    async def stop(self) -> None:
        await self._set_status(CallStatus.FINISHED, "stopped by user")
        try:
            await self.provider.stop()
            self.logger.log("Provider", "Stop command sent")
        except Exception as e:
            self.logger.error("Provider", f"Error stopping call: {e}")

    async def release(self) -> None:
        await self.provider.release()
        self._observers.clear()
        self.logger.save_transcript(self.session.transcript.messages)

    async def handle_event(self, event: Dict[str, Any]) -> None:
        name = event.get("event") or event.get("type")
        handler = self._handlers.get(name)
        if handler is None:
            self.logger.log("Provider", f"Ignoring unknown event: {name}")
            return
        await handler(event)

    async def _on_call_start(self, event: Dict[str, Any]) -> None:
        await self._set_status(CallStatus.ACTIVE, "call-start")

    async def _on_call_end(self, event: Dict[str, Any]) -> None:
        await self._set_status(CallStatus.FINISHED, "call-end")

    async def _on_message(self, event: Dict[str, Any]) -> None:
        message = event.get("message") or event
        if message.get("type") != "transcript" or message.get("transcriptType") != "final":
            return

        content = message.get("transcript") or ""
        entry = self.session.transcript.append(message.get("role") or "user", content)
        self.logger.log("Transcript", f"{entry['role']}: {content}")
        await self._emit("transcript", dict(entry))

        if self.session.purpose == CallPurpose.GENERATE:
            parameters = extract_parameters(content, self.session.parameters)
            if parameters != self.session.parameters:
                self.session.parameters = parameters
                self.logger.log("Extractor", "Interview parameters updated", parameters.model_dump())
                await self._emit("parameters", parameters.model_dump())

    async def _on_speech_start(self, event: Dict[str, Any]) -> None:
        self.session.is_speaking = True
        await self._emit("speaking", {"is_speaking": True})

    async def _on_speech_end(self, event: Dict[str, Any]) -> None:
        self.session.is_speaking = False
        await self._emit("speaking", {"is_speaking": False})

    async def _on_error(self, event: Dict[str, Any]) -> None:
        await self._handle_error(event.get("error", event))

    async def _handle_error(self, error: Any) -> None:
        outcome = classify_error(error)
        if isinstance(outcome, BenignEnd):
            self.logger.log("Provider", "Call ended normally. Not an error.", {"reason": outcome.reason})
            await self._set_status(CallStatus.FINISHED, outcome.reason)
            return

        self.logger.error("Provider", f"Voice provider error: {outcome.message}")
        self.session.error = outcome.message
        await self._emit("error", {"message": outcome.message})
        await self._set_status(CallStatus.INACTIVE, "provider error")
