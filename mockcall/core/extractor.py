import re
from typing import Dict, List, Tuple

from mockcall.core.models import InterviewParameters


ROLE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("Frontend Developer", ("front end", "frontend", "front-end")),
    ("Backend Developer", ("back end", "backend", "back-end")),
    ("Full Stack Developer", ("full stack", "fullstack", "full-stack")),
]

LEVEL_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("entry", ("entry level", "entry-level", "junior")),
    ("mid", ("mid", "intermediate")),
    ("senior", ("senior", "expert")),
]

TYPE_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("technical", ("technical",)),
    ("behavioral", ("behavioral", "behavioural")),
    ("mixed", ("mixed",)),
]

TECH_KEYWORDS = [
    "next.js",
    "react",
    "javascript",
    "typescript",
    "node",
    "vue",
    "angular",
    "html",
    "css",
    "tailwind",
    "bootstrap",
    "python",
    "django",
    "ruby",
    "rails",
]

_NUMBER_RE = re.compile(r"\d+")


def _first_match(text: str, vocabulary: List[Tuple[str, Tuple[str, ...]]]) -> str | None:
    for value, keywords in vocabulary:
        if any(keyword in text for keyword in keywords):
            return value
    return None


def extract_parameters(text: str, previous: InterviewParameters) -> InterviewParameters:
    """Fold one transcript fragment into a new parameters snapshot.

    Role and level are only filled while still empty; type and tech stack
    follow the most recent fragment that mentions them.
    """
    if not text:
        return previous

    lowered = text.lower()
    updates: Dict[str, object] = {}

    if "role" in lowered and not previous.role:
        role = _first_match(lowered, ROLE_KEYWORDS)
        if role:
            updates["role"] = role

    if ("level" in lowered or "experience" in lowered) and not previous.level:
        level = _first_match(lowered, LEVEL_KEYWORDS)
        if level:
            updates["level"] = level

    interview_type = _first_match(lowered, TYPE_KEYWORDS)
    if interview_type:
        updates["type"] = interview_type

    number = _NUMBER_RE.search(lowered)
    if number and "question" in lowered:
        updates["amount"] = int(number.group(0))

    found_tech = [tech for tech in TECH_KEYWORDS if tech in lowered]
    if found_tech:
        updates["techstack"] = ",".join(found_tech)

    if not updates:
        return previous
    return previous.model_copy(update=updates)
