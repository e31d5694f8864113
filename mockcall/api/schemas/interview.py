from typing import List

from pydantic import BaseModel, ConfigDict, Field


class GenerateInterviewRequest(BaseModel):
    role: str = "Frontend Developer"
    type: str = "mixed"
    level: str = "entry"
    techstack: str | List[str] = "JavaScript,React"
    amount: int = Field(default=5, ge=1, le=50)
    userid: str | None = None


class GenerateInterviewResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    interview_id: str = Field(alias="interviewId")
