from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, TypedDict

from pydantic import BaseModel, ConfigDict, Field

from mockcall.utils.logger import CallLogger

FEEDBACK_CATEGORIES = [
    "Communication Skills",
    "Technical Knowledge",
    "Problem Solving",
    "Cultural Fit",
    "Confidence and Clarity",
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CallStatus(str, Enum):
    INACTIVE = "INACTIVE"
    CONNECTING = "CONNECTING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class CallPurpose(str, Enum):
    GENERATE = "generate"
    PRACTICE = "practice"


class TranscriptMessage(TypedDict):
    role: str
    content: str


class InterviewParameters(BaseModel):
    """Working record assembled while a generate call is running.

    Frozen: each extraction step produces a new snapshot via ``model_copy``.
    """

    model_config = ConfigDict(frozen=True)

    role: str = ""
    type: str = "mixed"
    level: str = ""
    techstack: str = ""
    amount: int = 5


class CategoryScore(BaseModel):
    name: str
    score: float = Field(ge=0, le=100)
    comment: str = ""


class Interview(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    role: str
    level: str
    type: str
    techstack: List[str] = []
    questions: List[str] = Field(min_length=1)
    user_id: str = Field(alias="userId")
    finalized: bool = True
    cover_image: str = Field(default="", alias="coverImage")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class Feedback(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    interview_id: str = Field(alias="interviewId")
    user_id: str = Field(alias="userId")
    total_score: float = Field(alias="totalScore", ge=0, le=100)
    category_scores: List[CategoryScore] = Field(alias="categoryScores")
    strengths: List[str] = []
    areas_for_improvement: List[str] = Field(default=[], alias="areasForImprovement")
    final_assessment: str = Field(default="", alias="finalAssessment")
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    created_at: datetime = Field(default_factory=utc_now, alias="createdAt")


class PostCallState(TypedDict, total=False):
    purpose: str
    logger: CallLogger
    parameters: Dict[str, Any]
    transcript: List[TranscriptMessage]
    questions: List[str]
    feedback: Dict[str, Any]
    metrics: Dict[str, Any]
