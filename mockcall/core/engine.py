import asyncio
import time
from typing import Any, Dict, List

from langgraph.graph import END, START, StateGraph
from mistralai import Mistral

from mockcall.config.settings import settings
from mockcall.core.models import CallPurpose, InterviewParameters, PostCallState, TranscriptMessage
from mockcall.core.prompts import (
    CATEGORY_LIST,
    FEEDBACK_PROMPT,
    FEEDBACK_SYSTEM_PROMPT,
    QUESTIONS_PROMPT,
    QUESTIONS_SYSTEM_PROMPT,
)
from mockcall.core.repair import repair_feedback, repair_questions
from mockcall.core.transcript import TranscriptAccumulator
from mockcall.utils.logger import CallLogger


class InterviewEngine:
    """Language-model side of the post-call workflows.

    The compiled graph routes on ``purpose``: a generate call drafts the
    question list, a practice call evaluates the transcript. Each run logs into
    the ``CallLogger`` carried in its state, so token and latency metrics land
    in the log of the call that asked for them.
    """

    def __init__(self, client: Any | None = None, model: str | None = None):
        self.client = client if client is not None else Mistral(api_key=settings.MISTRAL_API_KEY)
        self.model = model or settings.MISTRAL_MODEL
        self.graph = self._build_graph()

    def _update_metrics(self, state: PostCallState, tokens_used: Any, latency: float):
        metrics = state.setdefault("metrics", {})
        prompt_tokens = getattr(tokens_used, "prompt_tokens", 0) or 0
        completion_tokens = getattr(tokens_used, "completion_tokens", 0) or 0
        metrics["prompt_tokens"] = metrics.get("prompt_tokens", 0) + prompt_tokens
        metrics["completion_tokens"] = metrics.get("completion_tokens", 0) + completion_tokens
        metrics["total_tokens"] = metrics.get("total_tokens", 0) + prompt_tokens + completion_tokens
        metrics.setdefault("latencies", []).append(latency)

    async def _call_llm_async(self, prompt: str, system_prompt: str | None,
                              state: PostCallState) -> str:
        logger = state["logger"]
        start_time = time.time()
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = await asyncio.to_thread(self.client.chat.complete, model=self.model, messages=messages)
        latency = (time.time() - start_time) * 1000
        logger.log_latency(latency)

        tokens_used = response.usage
        if tokens_used is not None:
            logger.log_tokens(tokens_used.prompt_tokens, tokens_used.completion_tokens)
        self._update_metrics(state, tokens_used, latency)

        content = response.choices[0].message.content
        return content if isinstance(content, str) else str(content or "")

    async def draft_questions_node(self, state: PostCallState) -> PostCallState:
        parameters = InterviewParameters(**state.get("parameters", {}))
        logger = state["logger"]
        logger.log("Generator", "Requesting interview questions", parameters.model_dump())

        raw = await self._call_llm_async(
            QUESTIONS_PROMPT.format(**parameters.model_dump()),
            QUESTIONS_SYSTEM_PROMPT,
            state
        )
        questions = repair_questions(raw)
        logger.log("Generator", f"Prepared {len(questions)} questions")

        state["questions"] = questions
        return state

    async def evaluate_transcript_node(self, state: PostCallState) -> PostCallState:
        logger = state["logger"]
        transcript = state.get("transcript", [])
        logger.log("Feedback", f"Evaluating transcript of {len(transcript)} messages")

        formatted = TranscriptAccumulator.from_messages(transcript).formatted()
        raw = await self._call_llm_async(
            FEEDBACK_PROMPT.format(transcript=formatted, categories=CATEGORY_LIST),
            FEEDBACK_SYSTEM_PROMPT,
            state
        )
        feedback = repair_feedback(raw)
        logger.log("Feedback", f"Evaluation ready. Total score: {feedback['totalScore']}")

        state["feedback"] = feedback
        return state

    def route_purpose(self, state: PostCallState) -> str:
        return CallPurpose(state.get("purpose")).value

    async def generate_questions(self, parameters: InterviewParameters,
                                 logger: CallLogger | None = None) -> List[str]:
        result = await self.graph.ainvoke({
            "purpose": CallPurpose.GENERATE.value,
            "parameters": parameters.model_dump(),
            "logger": logger or CallLogger(),
        })
        return result["questions"]

    async def synthesize_feedback(self, transcript: List[TranscriptMessage],
                                  logger: CallLogger | None = None) -> Dict[str, Any]:
        result = await self.graph.ainvoke({
            "purpose": CallPurpose.PRACTICE.value,
            "transcript": list(transcript),
            "logger": logger or CallLogger(),
        })
        return result["feedback"]

    def _build_graph(self) -> StateGraph:
        workflow = StateGraph(PostCallState)
        workflow.add_node("draft_questions", self.draft_questions_node)
        workflow.add_node("evaluate_transcript", self.evaluate_transcript_node)

        workflow.add_conditional_edges(
            START,
            self.route_purpose,
            {CallPurpose.GENERATE.value: "draft_questions", CallPurpose.PRACTICE.value: "evaluate_transcript"}
        )

        workflow.add_edge("draft_questions", END)
        workflow.add_edge("evaluate_transcript", END)
        return workflow.compile()
