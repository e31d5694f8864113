from dataclasses import dataclass, field
from typing import Any, Dict, List

from mockcall.core.models import CallPurpose, CallStatus, InterviewParameters
from mockcall.core.transcript import TranscriptAccumulator


@dataclass
class CallSession:
    purpose: CallPurpose
    session_id: str = ""
    user_name: str = ""
    user_id: str | None = None
    interview_id: str | None = None
    feedback_id: str | None = None
    questions: List[str] = field(default_factory=list)
    status: CallStatus = CallStatus.INACTIVE
    transcript: TranscriptAccumulator = field(default_factory=TranscriptAccumulator)
    is_speaking: bool = False
    error: str | None = None
    parameters: InterviewParameters = field(default_factory=InterviewParameters)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "purpose": self.purpose.value,
            "status": self.status.value,
            "is_speaking": self.is_speaking,
            "error": self.error,
            "transcript": self.transcript.messages,
            "last_message": self.transcript.last_message,
            "parameters": self.parameters.model_dump(),
        }
