import asyncio
from typing import Any, Awaitable, Callable, Dict

from mockcall.config.settings import settings
from mockcall.core.models import CallPurpose, CallStatus, InterviewParameters
from mockcall.core.session import CallSession
from mockcall.core.use_case import InterviewUseCase
from mockcall.utils.logger import CallLogger

Navigate = Callable[[str], Awaitable[None]]
NotifyError = Callable[[str], Awaitable[None]]

GENERATE_DEFAULTS = InterviewParameters(
    role="Frontend Developer",
    type="mixed",
    level="entry",
    techstack="JavaScript,React",
    amount=5,
)


def with_defaults(parameters: InterviewParameters) -> InterviewParameters:
    """Fill whatever the conversation left empty."""
    updates = {
        name: getattr(GENERATE_DEFAULTS, name)
        for name in InterviewParameters.model_fields
        if not getattr(parameters, name)
    }
    return parameters.model_copy(update=updates) if updates else parameters


class TerminalHandler:
    """Runs exactly one post-call workflow once the call reaches FINISHED.

    ``submitting`` is set on the first FINISHED observation and only cleared
    when a fresh call starts connecting. It is a plain flag: observers run on
    a single event loop.
    """

    def __init__(
        self,
        session: CallSession,
        use_case: InterviewUseCase,
        navigate: Navigate,
        notify_error: NotifyError,
        logger: CallLogger | None = None,
        success_delay: float | None = None,
        failure_delay: float | None = None,
    ):
        self.session = session
        self.use_case = use_case
        self.navigate = navigate
        self.notify_error = notify_error
        self.logger = logger or CallLogger()
        self.success_delay = settings.SUCCESS_REDIRECT_DELAY if success_delay is None else success_delay
        self.failure_delay = settings.FAILURE_REDIRECT_DELAY if failure_delay is None else failure_delay
        self.submitting = False
        self.task: asyncio.Task | None = None

    async def __call__(self, kind: str, payload: Dict[str, Any]) -> None:
        if kind != "status":
            return
        status = CallStatus(payload["status"])
        if status == CallStatus.CONNECTING:
            self.submitting = False
        elif status == CallStatus.FINISHED:
            self.on_finished()

    def on_finished(self) -> asyncio.Task | None:
        if self.submitting:
            self.logger.log("Terminal", "Submission already in progress, skipping")
            return None
        self.submitting = True
        self.task = asyncio.create_task(self.process_finished_call())
        return self.task

    async def process_finished_call(self) -> bool:
        purpose = self.session.purpose
        self.logger.log("Terminal", f"Processing finished call. Type: {purpose.value}",
                        {"messages": len(self.session.transcript)})

        if purpose == CallPurpose.GENERATE:
            success = await self._generate_interview()
            target = "/"
        else:
            success = await self._generate_feedback()
            target = f"/interview/{self.session.interview_id}/feedback"

        if success:
            await asyncio.sleep(self.success_delay)
            await self.navigate(target)
        else:
            await asyncio.sleep(self.failure_delay)
            await self.navigate("/")
        return success

    async def _fail(self, message: str) -> bool:
        self.session.error = message
        self.logger.error("Terminal", message)
        await self.notify_error(message)
        return False

    async def _generate_interview(self) -> bool:
        if not self.session.user_id:
            return await self._fail("Missing user data for interview generation")

        parameters = with_defaults(self.session.parameters)
        try:
            interview = await self.use_case.generate_interview(
                role=parameters.role,
                type=parameters.type,
                level=parameters.level,
                techstack=parameters.techstack,
                amount=parameters.amount,
                user_id=self.session.user_id,
                logger=self.logger,
            )
        except Exception as e:
            self.logger.error("Terminal", f"Interview generation failed: {e}")
            return await self._fail("Failed to create interview")

        self.logger.log("Terminal", f"Interview created: {interview.id}")
        return True

    async def _generate_feedback(self) -> bool:
        if not self.session.interview_id or not self.session.user_id:
            return await self._fail("Missing interview data for feedback generation")

        try:
            feedback_id = await self.use_case.create_feedback(
                interview_id=self.session.interview_id,
                user_id=self.session.user_id,
                transcript=self.session.transcript.messages,
                feedback_id=self.session.feedback_id,
                logger=self.logger,
            )
        except Exception as e:
            return await self._fail(f"Error creating feedback: {e}")

        self.session.feedback_id = feedback_id
        self.logger.log("Terminal", f"Feedback created successfully: {feedback_id}")
        return True
