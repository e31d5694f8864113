import unittest

from mockcall.core.models import CallPurpose, CallStatus
from mockcall.core.session import CallSession
from mockcall.storages.call_registry import CallRegistry


class CallRegistryTest(unittest.TestCase):
    def setUp(self):
        self.calls = CallRegistry()

    def test_register_and_discard(self):
        session = CallSession(purpose=CallPurpose.PRACTICE, session_id="call-1")
        self.calls.register(session)

        self.assertIn("call-1", self.calls)
        self.assertIs(self.calls.get("call-1"), session)
        self.assertIs(self.calls.discard("call-1"), session)
        self.assertIsNone(self.calls.discard("call-1"))
        self.assertEqual(len(self.calls), 0)

    def test_requires_session_id(self):
        with self.assertRaises(ValueError):
            self.calls.register(CallSession(purpose=CallPurpose.GENERATE))

    def test_live_calls(self):
        for session_id, status in (("a", CallStatus.CONNECTING), ("b", CallStatus.ACTIVE),
                                   ("c", CallStatus.FINISHED), ("d", CallStatus.INACTIVE)):
            self.calls.register(CallSession(purpose=CallPurpose.PRACTICE, session_id=session_id, status=status))

        self.assertEqual([s.session_id for s in self.calls.live()], ["a", "b"])


if __name__ == '__main__':
    unittest.main()
