import unittest
from unittest.mock import AsyncMock

from mockcall.providers.voice import (
    DEFAULT_ERROR_MESSAGE,
    BenignEnd,
    FatalError,
    RelayVoiceProvider,
    classify_error,
)


class ClassifyErrorTest(unittest.TestCase):
    def test_meeting_ended_shapes_are_benign(self):
        for error in (
            {"errorMsg": "Meeting has ended"},
            {"error": {"errorMsg": "Meeting has ended"}},
            {"message": "Error: Meeting has ended abruptly"},
            "Meeting has ended",
            RuntimeError("Meeting has ended"),
        ):
            self.assertIsInstance(classify_error(error), BenignEnd, error)

    def test_real_errors_are_fatal(self):
        self.assertEqual(classify_error({"errorMsg": "Microphone denied"}), FatalError("Microphone denied"))
        self.assertEqual(classify_error({"message": "Network down"}), FatalError("Network down"))
        self.assertEqual(classify_error("boom"), FatalError("boom"))
        self.assertEqual(classify_error(ValueError("bad workflow")), FatalError("bad workflow"))

    def test_shapeless_errors_get_default_message(self):
        self.assertEqual(classify_error(None), FatalError(DEFAULT_ERROR_MESSAGE))
        self.assertEqual(classify_error({}), FatalError(DEFAULT_ERROR_MESSAGE))


class RelayVoiceProviderTest(unittest.IsolatedAsyncioTestCase):
    async def test_commands_are_relayed(self):
        send = AsyncMock()
        provider = RelayVoiceProvider(send)

        await provider.start("wf-1", {"variableValues": {"username": "Ada"}})
        await provider.stop()

        send.assert_any_await({
            "type": "voice.start",
            "target": "wf-1",
            "options": {"variableValues": {"username": "Ada"}},
        })
        send.assert_any_await({"type": "voice.stop"})

    async def test_released_handle(self):
        send = AsyncMock()
        provider = RelayVoiceProvider(send)
        await provider.release()

        await provider.stop()
        with self.assertRaises(RuntimeError):
            await provider.start("wf-1", {})
        send.assert_not_awaited()


if __name__ == '__main__':
    unittest.main()
