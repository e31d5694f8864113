from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class TranscriptMessageSchema(BaseModel):
    role: Literal["user", "system", "assistant"]
    content: str


class CreateFeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    interview_id: str | None = Field(default=None, alias="interviewId")
    user_id: str | None = Field(default=None, alias="userId")
    transcript: List[TranscriptMessageSchema] | None = None
    feedback_id: str | None = Field(default=None, alias="feedbackId")


class CreateFeedbackResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    feedback_id: str | None = Field(default=None, alias="feedbackId")
