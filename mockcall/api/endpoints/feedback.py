import logging

from fastapi import APIRouter, Depends

from mockcall.api.deps import get_use_case
from mockcall.api.schemas import CreateFeedbackRequest, CreateFeedbackResponse
from mockcall.core.use_case import InterviewUseCase
from mockcall.system.exceptions import BadRequestException, BaseHTTPException, InternalServerException

logger = logging.getLogger(__name__)
feedback_router = APIRouter()


@feedback_router.post("", response_model=CreateFeedbackResponse)
async def create_feedback(
    request: CreateFeedbackRequest,
    use_case: InterviewUseCase = Depends(get_use_case)
):
    transcript = None
    if request.transcript is not None:
        transcript = [{"role": m.role, "content": m.content} for m in request.transcript]

    try:
        feedback_id = await use_case.create_feedback(
            interview_id=request.interview_id,
            user_id=request.user_id,
            transcript=transcript,
            feedback_id=request.feedback_id,
        )
    except ValueError as e:
        logger.warning(f"Rejected feedback request: {e}")
        raise BadRequestException(str(e))
    except BaseHTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in create_feedback: {e}", exc_info=True)
        raise InternalServerException("Failed to create feedback")

    return CreateFeedbackResponse(success=True, feedback_id=feedback_id)
