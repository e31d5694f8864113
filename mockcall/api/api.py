from fastapi import APIRouter

from mockcall.api.endpoints.call import call_router
from mockcall.api.endpoints.feedback import feedback_router
from mockcall.api.endpoints.interview import interview_router
from mockcall.api.endpoints.users import users_router

api_router = APIRouter()

api_router.include_router(interview_router, tags=["interview"])
api_router.include_router(feedback_router, prefix="/feedback", tags=["feedback"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(call_router, prefix="/call", tags=["call"])
