import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from mockcall.api.deps import get_use_case
from mockcall.api.schemas import GenerateInterviewRequest, GenerateInterviewResponse
from mockcall.config.settings import settings
from mockcall.core.models import Feedback, Interview
from mockcall.core.use_case import InterviewUseCase
from mockcall.system.exceptions import (
    BadRequestException,
    BaseHTTPException,
    InternalServerException,
    NotFoundException,
)

logger = logging.getLogger(__name__)
interview_router = APIRouter()


@interview_router.get("/vapi/generate")
async def generate_probe():
    return {"success": True, "data": "hello"}


@interview_router.post("/vapi/generate", response_model=GenerateInterviewResponse)
async def generate_interview(
    request: GenerateInterviewRequest,
    use_case: InterviewUseCase = Depends(get_use_case)
):
    try:
        interview = await use_case.generate_interview(
            role=request.role,
            type=request.type,
            level=request.level,
            techstack=request.techstack,
            amount=request.amount,
            user_id=request.userid,
        )
    except ValueError as e:
        logger.warning(f"Rejected generate request: {e}")
        raise BadRequestException(str(e))
    except BaseHTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in generate_interview: {e}", exc_info=True)
        raise InternalServerException("Failed to generate interview")

    logger.info(f"Interview {interview.id} generated for user {request.userid}")
    return GenerateInterviewResponse(success=True, interview_id=interview.id)


@interview_router.get("/interviews", response_model=List[Interview])
async def list_user_interviews(
    user_id: str = Query(..., description="Owner of the interviews"),
    use_case: InterviewUseCase = Depends(get_use_case)
):
    return use_case.get_interviews_by_user_id(user_id)


@interview_router.get("/interviews/latest", response_model=List[Interview])
async def list_latest_interviews(
    user_id: str = Query(..., description="User whose own interviews are excluded"),
    limit: int = Query(settings.LATEST_INTERVIEWS_LIMIT, ge=1, le=100),
    use_case: InterviewUseCase = Depends(get_use_case)
):
    return use_case.get_latest_interviews(user_id, limit=limit)


@interview_router.get("/interviews/{interview_id}", response_model=Interview)
async def get_interview(interview_id: str, use_case: InterviewUseCase = Depends(get_use_case)):
    interview = use_case.get_interview_by_id(interview_id)
    if interview is None:
        raise NotFoundException(f"Interview {interview_id} not found")
    return interview


@interview_router.get("/interviews/{interview_id}/feedback", response_model=Feedback)
async def get_interview_feedback(
    interview_id: str,
    user_id: str = Query(..., description="Owner of the feedback"),
    use_case: InterviewUseCase = Depends(get_use_case)
):
    feedback = use_case.get_feedback_by_interview_id(interview_id, user_id)
    if feedback is None:
        raise NotFoundException(f"No feedback found for interview {interview_id}")
    return feedback
