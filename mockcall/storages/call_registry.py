from typing import Dict, List

from mockcall.core.models import CallStatus
from mockcall.core.session import CallSession

LIVE_STATUSES = (CallStatus.CONNECTING, CallStatus.ACTIVE)


class CallRegistry:
    """Call sessions attached to an open websocket, keyed by session id."""

    def __init__(self):
        self._calls: Dict[str, CallSession] = {}

    def register(self, session: CallSession) -> None:
        if not session.session_id:
            raise ValueError("Call session has no id")
        self._calls[session.session_id] = session

    def get(self, session_id: str) -> CallSession | None:
        return self._calls.get(session_id)

    def discard(self, session_id: str) -> CallSession | None:
        return self._calls.pop(session_id, None)

    def live(self) -> List[CallSession]:
        return [s for s in self._calls.values() if s.status in LIVE_STATUSES]

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._calls

    def __len__(self) -> int:
        return len(self._calls)
