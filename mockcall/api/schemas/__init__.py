from mockcall.api.schemas.call import StartCallMessage
from mockcall.api.schemas.feedback import (
    CreateFeedbackRequest,
    CreateFeedbackResponse,
    TranscriptMessageSchema
)
from mockcall.api.schemas.interview import (
    GenerateInterviewRequest,
    GenerateInterviewResponse
)
from mockcall.api.schemas.users import SignUpRequest, SignUpResponse

__all__ = [
    "StartCallMessage",
    "CreateFeedbackRequest",
    "CreateFeedbackResponse",
    "TranscriptMessageSchema",
    "GenerateInterviewRequest",
    "GenerateInterviewResponse",
    "SignUpRequest",
    "SignUpResponse"
]
