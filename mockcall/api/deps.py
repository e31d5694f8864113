from mockcall.core.engine import InterviewEngine
from mockcall.core.use_case import InterviewUseCase
from mockcall.storages.document_store import DocumentStore
from mockcall.storages.call_registry import CallRegistry

_engine: InterviewEngine | None = None
_store: DocumentStore | None = None
_calls: CallRegistry | None = None
_use_case: InterviewUseCase | None = None


def get_engine() -> InterviewEngine:
    global _engine
    if _engine is None:
        _engine = InterviewEngine()
    return _engine


def get_store() -> DocumentStore:
    global _store
    if _store is None:
        _store = DocumentStore()
    return _store


def get_calls() -> CallRegistry:
    global _calls
    if _calls is None:
        _calls = CallRegistry()
    return _calls


def get_use_case() -> InterviewUseCase:
    global _use_case
    if _use_case is None:
        _use_case = InterviewUseCase(get_engine(), get_store())
    return _use_case
