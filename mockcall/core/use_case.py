from typing import List

from mockcall.core.engine import InterviewEngine
from mockcall.core.models import Feedback, Interview, InterviewParameters, TranscriptMessage, User
from mockcall.storages.document_store import DocumentStore
from mockcall.utils.covers import get_random_interview_cover
from mockcall.utils.logger import CallLogger

INTERVIEWS = "interviews"
FEEDBACK = "feedback"
USERS = "users"


class InterviewUseCase:
    def __init__(self, engine: InterviewEngine, store: DocumentStore):
        self.engine = engine
        self.store = store

    async def generate_interview(
        self,
        role: str,
        type: str,
        level: str,
        techstack: str | List[str],
        amount: int,
        user_id: str | None,
        logger: CallLogger | None = None,
    ) -> Interview:
        if not user_id:
            raise ValueError("userid is required")

        if isinstance(techstack, list):
            stack = [str(t).strip() for t in techstack if str(t).strip()]
        else:
            stack = [t.strip() for t in (techstack or "").split(",") if t.strip()]

        parameters = InterviewParameters(
            role=role, type=type, level=level, techstack=",".join(stack), amount=amount
        )
        logger = logger or CallLogger()
        questions = await self.engine.generate_questions(parameters, logger=logger)

        interview = Interview(
            role=role,
            type=type,
            level=level,
            techstack=stack,
            questions=questions,
            user_id=user_id,
            finalized=True,
            cover_image=get_random_interview_cover(),
        )
        interview.id = self.store.add(INTERVIEWS, interview.model_dump(mode="json", by_alias=True))
        logger.log("Generator", f"Interview {interview.id} stored for user {user_id}")
        return interview

    async def create_feedback(
        self,
        interview_id: str | None,
        user_id: str | None,
        transcript: List[TranscriptMessage] | None,
        feedback_id: str | None = None,
        logger: CallLogger | None = None,
    ) -> str:
        if not interview_id or not user_id or transcript is None:
            raise ValueError("interviewId, userId and transcript are required")

        logger = logger or CallLogger()
        evaluation = await self.engine.synthesize_feedback(transcript, logger=logger)
        feedback = Feedback(interview_id=interview_id, user_id=user_id, **evaluation)
        document = feedback.model_dump(mode="json", by_alias=True)

        if feedback_id:
            self.store.set(FEEDBACK, feedback_id, document)
            logger.log("Feedback", f"Feedback updated for ID: {feedback_id}")
        else:
            feedback_id = self.store.add(FEEDBACK, document)
            logger.log("Feedback", f"New feedback created with ID: {feedback_id}")
        return feedback_id

    def get_interview_by_id(self, interview_id: str) -> Interview | None:
        if not interview_id:
            return None
        document = self.store.get(INTERVIEWS, interview_id)
        return Interview.model_validate(document) if document else None

    def get_feedback_by_interview_id(self, interview_id: str, user_id: str) -> Feedback | None:
        if not interview_id or not user_id:
            return None
        documents = self.store.query(
            FEEDBACK,
            filters=[("interviewId", "==", interview_id), ("userId", "==", user_id)],
            order_by="createdAt",
            descending=True,
            limit=1,
        )
        return Feedback.model_validate(documents[0]) if documents else None

    def get_interviews_by_user_id(self, user_id: str | None) -> List[Interview]:
        if not user_id:
            return []
        documents = self.store.query(
            INTERVIEWS,
            filters=[("userId", "==", user_id)],
            order_by="createdAt",
            descending=True,
        )
        return [Interview.model_validate(d) for d in documents]

    def get_latest_interviews(self, user_id: str | None, limit: int = 20) -> List[Interview]:
        if not user_id:
            return []
        documents = self.store.query(
            INTERVIEWS,
            filters=[("finalized", "==", True), ("userId", "!=", user_id)],
            order_by="createdAt",
            descending=True,
            limit=limit,
        )
        return [Interview.model_validate(d) for d in documents]

    def create_user(self, uid: str, name: str, email: str) -> User:
        if not uid or not name or not email:
            raise ValueError("Missing user information.")
        if self.store.exists(USERS, uid):
            raise ValueError("User record already exists. Please sign in.")

        user = User(id=uid, name=name, email=email)
        self.store.set(USERS, uid, user.model_dump(mode="json", by_alias=True))
        return user

    def get_user(self, uid: str) -> User | None:
        document = self.store.get(USERS, uid) if uid else None
        return User.model_validate(document) if document else None

