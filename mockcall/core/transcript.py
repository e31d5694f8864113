from typing import Iterable, Iterator, List

from mockcall.core.models import TranscriptMessage


class TranscriptAccumulator:
    """Append-only log of finalized transcript fragments, in arrival order."""

    def __init__(self):
        self._messages: List[TranscriptMessage] = []

    @classmethod
    def from_messages(cls, messages: Iterable[TranscriptMessage]) -> "TranscriptAccumulator":
        transcript = cls()
        for m in messages:
            transcript.append(m["role"], m["content"])
        return transcript

    def append(self, role: str, content: str) -> TranscriptMessage:
        message: TranscriptMessage = {"role": role, "content": content}
        self._messages.append(message)
        return message

    @property
    def messages(self) -> List[TranscriptMessage]:
        return [dict(m) for m in self._messages]

    @property
    def last_message(self) -> str:
        if not self._messages:
            return ""
        return self._messages[-1]["content"]

    def formatted(self) -> str:
        return "".join(f"- {m['role']}: {m['content']}\n" for m in self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[TranscriptMessage]:
        return iter(self.messages)
