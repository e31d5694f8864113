import logging

from fastapi import APIRouter, Depends

from mockcall.api.deps import get_use_case
from mockcall.api.schemas import SignUpRequest, SignUpResponse
from mockcall.core.models import User
from mockcall.core.use_case import InterviewUseCase
from mockcall.system.exceptions import BadRequestException, NotFoundException

logger = logging.getLogger(__name__)
users_router = APIRouter()


@users_router.post("", response_model=SignUpResponse)
async def sign_up(request: SignUpRequest, use_case: InterviewUseCase = Depends(get_use_case)):
    try:
        use_case.create_user(request.uid, request.name, request.email)
    except ValueError as e:
        logger.warning(f"signUp rejected for UID {request.uid}: {e}")
        raise BadRequestException(str(e))

    logger.info(f"User record created for UID: {request.uid}")
    return SignUpResponse(success=True, message="Account created successfully")


@users_router.get("/{uid}", response_model=User)
async def get_user(uid: str, use_case: InterviewUseCase = Depends(get_use_case)):
    user = use_case.get_user(uid)
    if user is None:
        raise NotFoundException(f"User {uid} not found")
    return user
