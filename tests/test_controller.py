import unittest

from mockcall.core.controller import CallController
from mockcall.core.models import CallPurpose, CallStatus
from mockcall.core.session import CallSession
from mockcall.utils.logger import CallLogger
from tests.fakes import FakeVoiceProvider, transcript_event


class CallControllerTest(unittest.IsolatedAsyncioTestCase):
    def make_controller(self, purpose=CallPurpose.PRACTICE, provider=None, **session_fields):
        session = CallSession(purpose=purpose, **session_fields)
        provider = provider or FakeVoiceProvider()
        controller = CallController(provider, session, CallLogger(), workflow_id="wf-1", interviewer_id="iv-1")
        events = []

        async def record(kind, payload):
            events.append((kind, payload))

        controller.subscribe(record)
        return controller, provider, events

    def statuses(self, events):
        return [payload["status"] for kind, payload in events if kind == "status"]

    async def test_practice_start(self):
        controller, provider, events = self.make_controller(questions=["Q1", "Q2"])

        await controller.start()

        self.assertEqual(controller.session.status, CallStatus.CONNECTING)
        self.assertEqual(provider.started, [(
            "iv-1",
            {"variableValues": {"questions": "- Q1\n- Q2"}, "clientMessages": [], "serverMessages": []}
        )])
        self.assertEqual(self.statuses(events), ["CONNECTING"])

    async def test_generate_start(self):
        controller, provider, _ = self.make_controller(
            purpose=CallPurpose.GENERATE, user_name="Ada", user_id="u1"
        )

        await controller.start()

        target, options = provider.started[0]
        self.assertEqual(target, "wf-1")
        self.assertEqual(options["variableValues"], {"username": "Ada", "userid": "u1"})

    async def test_generate_start_requires_user(self):
        controller, provider, _ = self.make_controller(purpose=CallPurpose.GENERATE, user_name="Ada")

        await controller.start()

        self.assertEqual(provider.started, [])
        self.assertEqual(controller.session.status, CallStatus.INACTIVE)
        self.assertTrue(controller.session.error)

    async def test_provider_start_failure(self):
        provider = FakeVoiceProvider(start_error=RuntimeError("workflow not found"))
        controller, _, events = self.make_controller(provider=provider)

        await controller.start()

        self.assertEqual(controller.session.status, CallStatus.INACTIVE)
        self.assertEqual(controller.session.error, "workflow not found")
        self.assertIn(("error", {"message": "workflow not found"}), events)

    async def test_start_clears_previous_error(self):
        controller, _, _ = self.make_controller()
        controller.session.error = "old failure"

        await controller.start()

        self.assertIsNone(controller.session.error)

    async def test_lifecycle_events(self):
        controller, _, events = self.make_controller()

        await controller.start()
        await controller.handle_event({"event": "call-start"})
        self.assertEqual(controller.session.status, CallStatus.ACTIVE)
        await controller.handle_event({"event": "call-end"})

        self.assertEqual(controller.session.status, CallStatus.FINISHED)
        self.assertEqual(self.statuses(events), ["CONNECTING", "ACTIVE", "FINISHED"])

    async def test_final_transcripts_only(self):
        controller, _, events = self.make_controller()

        await controller.handle_event(transcript_event("assistant", "Hello"))
        await controller.handle_event(transcript_event("user", "Hi th", transcript_type="partial"))
        await controller.handle_event({"event": "message", "message": {"type": "status-update"}})
        await controller.handle_event(transcript_event("user", "Hi there"))

        self.assertEqual(controller.session.transcript.messages, [
            {"role": "assistant", "content": "Hello"},
            {"role": "user", "content": "Hi there"},
        ])
        self.assertEqual([k for k, _ in events], ["transcript", "transcript"])

    async def test_generate_session_extracts_parameters(self):
        controller, _, events = self.make_controller(purpose=CallPurpose.GENERATE)

        await controller.handle_event(transcript_event("user", "A backend role, 3 questions"))

        self.assertEqual(controller.session.parameters.role, "Backend Developer")
        self.assertEqual(controller.session.parameters.amount, 3)
        self.assertIn("parameters", [k for k, _ in events])

    async def test_practice_session_skips_extraction(self):
        controller, _, _ = self.make_controller()

        await controller.handle_event(transcript_event("user", "A backend role, 3 questions"))

        self.assertEqual(controller.session.parameters.role, "")
        self.assertEqual(len(controller.session.transcript), 1)

    async def test_speech_events_toggle_flag_only(self):
        controller, _, events = self.make_controller()
        await controller.handle_event({"event": "call-start"})

        await controller.handle_event({"event": "speech-start"})
        self.assertTrue(controller.session.is_speaking)
        await controller.handle_event({"event": "speech-end"})

        self.assertFalse(controller.session.is_speaking)
        self.assertEqual(controller.session.status, CallStatus.ACTIVE)
        self.assertEqual(self.statuses(events), ["ACTIVE"])

    async def test_meeting_ended_error_finishes_call(self):
        controller, _, events = self.make_controller()
        await controller.handle_event({"event": "call-start"})

        await controller.handle_event({"event": "error", "errorMsg": "Meeting has ended"})

        self.assertEqual(controller.session.status, CallStatus.FINISHED)
        self.assertIsNone(controller.session.error)
        self.assertNotIn("error", [k for k, _ in events])

    async def test_nested_meeting_ended_error(self):
        controller, _, _ = self.make_controller()

        await controller.handle_event({"event": "error", "error": {"error": {"errorMsg": "Meeting has ended"}}})

        self.assertEqual(controller.session.status, CallStatus.FINISHED)

    async def test_real_error_abandons_session(self):
        controller, _, events = self.make_controller()
        await controller.handle_event({"event": "call-start"})

        await controller.handle_event({"event": "error", "error": {"errorMsg": "Transport failure"}})

        self.assertEqual(controller.session.status, CallStatus.INACTIVE)
        self.assertEqual(controller.session.error, "Transport failure")
        self.assertIn(("error", {"message": "Transport failure"}), events)

    async def test_stop_finishes_without_acknowledgement(self):
        controller, provider, _ = self.make_controller()
        await controller.handle_event({"event": "call-start"})

        await controller.stop()

        self.assertEqual(provider.stop_calls, 1)
        self.assertEqual(controller.session.status, CallStatus.FINISHED)

    async def test_stop_finishes_even_when_provider_fails(self):
        provider = FakeVoiceProvider(stop_error=RuntimeError("socket closed"))
        controller, _, _ = self.make_controller(provider=provider)
        await controller.handle_event({"event": "call-start"})

        await controller.stop()

        self.assertEqual(controller.session.status, CallStatus.FINISHED)

    async def test_unknown_event_is_ignored(self):
        controller, _, events = self.make_controller()

        await controller.handle_event({"event": "volume-level", "volume": 0.4})

        self.assertEqual(events, [])
        self.assertEqual(controller.session.status, CallStatus.INACTIVE)

    async def test_release(self):
        controller, provider, events = self.make_controller()

        await controller.release()
        await controller.handle_event({"event": "call-start"})

        self.assertTrue(provider.released)
        self.assertEqual(events, [])


if __name__ == '__main__':
    unittest.main()
