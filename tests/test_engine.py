import json
import unittest
from unittest.mock import MagicMock

from mockcall.core.engine import InterviewEngine
from mockcall.core.models import FEEDBACK_CATEGORIES, InterviewParameters
from mockcall.core.repair import DEFAULT_QUESTION, fallback_feedback
from mockcall.utils.logger import CallLogger
from tests.fakes import completion


class InterviewEngineTest(unittest.IsolatedAsyncioTestCase):
    def make_engine(self, content):
        client = MagicMock()
        client.chat.complete.return_value = completion(content)
        return InterviewEngine(client=client, model="test-model"), client

    async def test_generate_questions(self):
        engine, client = self.make_engine('Here you go: ["What is a closure?", "Explain REST/GraphQL"]')

        questions = await engine.generate_questions(InterviewParameters(
            role="Backend Developer", level="senior", type="technical", techstack="node,python", amount=2
        ))

        self.assertEqual(questions, ["What is a closure?", "Explain REST GraphQL"])
        kwargs = client.chat.complete.call_args.kwargs
        self.assertEqual(kwargs["model"], "test-model")
        self.assertEqual([m["role"] for m in kwargs["messages"]], ["system", "user"])
        prompt = kwargs["messages"][1]["content"]
        self.assertIn("Backend Developer", prompt)
        self.assertIn("node,python", prompt)
        self.assertIn("The amount of questions is 2", prompt)

    async def test_generate_questions_fallback(self):
        engine, _ = self.make_engine("I cannot help with that.")

        questions = await engine.generate_questions(InterviewParameters())

        self.assertEqual(questions, [DEFAULT_QUESTION])

    async def test_synthesize_feedback(self):
        payload = {
            "categoryScores": {
                "communicationSkills": 90,
                "technicalKnowledge": 70,
                "problemSolving": 80,
                "culturalFit": 60,
                "confidenceClarity": 50,
            },
            "strengths": ["Articulate"],
            "areasForImprovement": ["System design"],
            "finalAssessment": "Promising candidate.",
        }
        engine, client = self.make_engine(json.dumps(payload))
        transcript = [
            {"role": "assistant", "content": "Describe a hard bug."},
            {"role": "user", "content": "A race condition in a cache."},
        ]

        feedback = await engine.synthesize_feedback(transcript)

        self.assertEqual([c["name"] for c in feedback["categoryScores"]], FEEDBACK_CATEGORIES)
        self.assertEqual(feedback["totalScore"], 70)
        self.assertEqual(feedback["finalAssessment"], "Promising candidate.")
        prompt = client.chat.complete.call_args.kwargs["messages"][1]["content"]
        self.assertIn("- user: A race condition in a cache.\n", prompt)
        self.assertIn("Confidence and Clarity", prompt)

    async def test_synthesize_feedback_fallback(self):
        engine, _ = self.make_engine("The candidate did fine overall.")

        feedback = await engine.synthesize_feedback([{"role": "user", "content": "hi"}])

        self.assertEqual(feedback, fallback_feedback())

    async def test_metrics_land_in_each_call_log(self):
        engine, _ = self.make_engine('["Q1"]')
        first, second = CallLogger(session_id="call-1"), CallLogger(session_id="call-2")

        await engine.generate_questions(InterviewParameters(), logger=first)
        await engine.synthesize_feedback([{"role": "user", "content": "hi"}], logger=second)
        await engine.generate_questions(InterviewParameters(), logger=second)

        self.assertEqual(first.get_log_data()["metrics"]["total_tokens"], 15)
        self.assertEqual(len(first.get_log_data()["metrics"]["latency_ms"]), 1)
        self.assertEqual(second.get_log_data()["metrics"]["total_tokens"], 30)
        self.assertEqual(len(second.get_log_data()["metrics"]["latency_ms"]), 2)
        self.assertFalse(hasattr(engine, "logger"))

    async def test_graph_routes_on_purpose(self):
        engine, _ = self.make_engine('["Q1"]')

        result = await engine.graph.ainvoke({
            "purpose": "generate",
            "parameters": InterviewParameters().model_dump(),
            "logger": CallLogger(),
        })

        self.assertEqual(result["questions"], ["Q1"])
        self.assertNotIn("feedback", result)
        self.assertEqual(result["metrics"]["total_tokens"], 15)

    def test_route_purpose(self):
        engine, _ = self.make_engine("")
        self.assertEqual(engine.route_purpose({"purpose": "practice"}), "practice")
        with self.assertRaises(ValueError):
            engine.route_purpose({"purpose": "interview"})


if __name__ == '__main__':
    unittest.main()
