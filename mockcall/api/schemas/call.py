from typing import List

from pydantic import BaseModel

from mockcall.core.models import CallPurpose


class StartCallMessage(BaseModel):
    purpose: CallPurpose
    user_name: str = ""
    user_id: str | None = None
    interview_id: str | None = None
    feedback_id: str | None = None
    questions: List[str] = []
