import json
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from mockcall.api.deps import get_calls, get_use_case
from mockcall.api.schemas import StartCallMessage
from mockcall.config.settings import settings
from mockcall.core.controller import CallController
from mockcall.core.models import CallStatus
from mockcall.core.session import CallSession
from mockcall.core.terminal import TerminalHandler
from mockcall.providers.voice import RelayVoiceProvider
from mockcall.storages.call_registry import CallRegistry
from mockcall.system.exceptions import NotFoundException
from mockcall.utils.logger import CallLogger

logger = logging.getLogger(__name__)
call_router = APIRouter()


@call_router.get("/sessions")
async def list_live_calls(calls: CallRegistry = Depends(get_calls)):
    return [session.snapshot() for session in calls.live()]


@call_router.get("/sessions/{session_id}")
async def get_call_session(session_id: str, calls: CallRegistry = Depends(get_calls)):
    session = calls.get(session_id)
    if session is None:
        raise NotFoundException(f"Call session {session_id} not found")
    return session.snapshot()


async def websocket_call(websocket: WebSocket):
    logger.info(f"WebSocket connection attempt from {websocket.client}")
    await websocket.accept()

    calls = get_calls()
    use_case = get_use_case()
    session_id: str | None = None
    controller: CallController | None = None

    async def send(payload: Dict[str, Any]) -> None:
        if websocket.client_state != WebSocketState.CONNECTED:
            logger.info(f"Dropping {payload.get('type')} message, websocket closed")
            return
        await websocket.send_text(json.dumps(payload, ensure_ascii=False))

    async def forward(kind: str, payload: Dict[str, Any]) -> None:
        await send({"type": kind, **payload})

    async def navigate(path: str) -> None:
        await send({"type": "navigate", "path": path})

    async def notify_error(message: str) -> None:
        await send({"type": "error", "message": message})

    async def close_call() -> None:
        if controller is not None:
            await controller.release()
        if session_id is not None:
            calls.discard(session_id)

    try:
        while True:
            data = await websocket.receive_text()
            try:
                message = json.loads(data)
            except json.JSONDecodeError:
                await notify_error("Malformed message")
                continue

            action = message.get("action")

            if action == "start":
                if controller is not None and controller.session.status in (CallStatus.CONNECTING, CallStatus.ACTIVE):
                    await notify_error("A call is already in progress")
                    continue
                try:
                    request = StartCallMessage.model_validate(message)
                except ValidationError as e:
                    await notify_error(f"Invalid start request: {e.errors()[0]['msg']}")
                    continue

                await close_call()
                session_id = message.get("session_id") or f"call_{uuid.uuid4().hex[:8]}"
                session = CallSession(
                    purpose=request.purpose,
                    session_id=session_id,
                    user_name=request.user_name,
                    user_id=request.user_id,
                    interview_id=request.interview_id,
                    feedback_id=request.feedback_id,
                    questions=request.questions,
                )
                call_logger = CallLogger(log_dir=settings.LOG_DIR, session_id=session_id)
                controller = CallController(RelayVoiceProvider(send), session, call_logger)
                controller.subscribe(forward)
                controller.subscribe(TerminalHandler(session, use_case, navigate, notify_error, call_logger))
                calls.register(session)

                logger.info(f"Starting {request.purpose.value} call: {session_id}")
                await send({"type": "session_id", "session_id": session_id})
                await controller.start()

            elif action in ("event", "stop", "get_state"):
                if controller is None:
                    await notify_error("No active call. Start a new call first.")
                    continue
                if action == "event":
                    await controller.handle_event(message)
                elif action == "stop":
                    logger.info(f"User requested stop for call {session_id}")
                    await controller.stop()
                else:
                    await send({"type": "state", "state": controller.session.snapshot()})

            else:
                logger.warning(f"Unknown websocket action: {action}")
                await notify_error(f"Unknown action: {action}")

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for call {session_id}")
    finally:
        await close_call()
