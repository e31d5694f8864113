"""Recovery of JSON payloads from free-form language-model output.

Both generators ask the model for JSON and both have to live with whatever
comes back. The cascade is the same for questions and feedback:

1. parse the whole reply;
2. parse the span from the first opening bracket to its matching close,
   retrying once with fences, ``//`` comments and trailing commas removed;
3. salvage individual lines;
4. fall back to a fixed value of the expected shape.

None of the public functions here raise.
"""
import json
import re
from typing import Any, Dict, List

from mockcall.core.models import FEEDBACK_CATEGORIES

DEFAULT_QUESTION = "Can you tell me about yourself and your professional experience?"
FALLBACK_SCORE = 50
FALLBACK_COMMENT = "Limited assessment: the evaluation could not be fully interpreted."
FALLBACK_ASSESSMENT = (
    "The assessment is limited because the evaluation could not be interpreted. "
    "All categories were given a neutral score; try another practice session for detailed feedback."
)

_PAIRS = {"[": "]", "{": "}"}
_UNSAFE_CHARS_RE = re.compile(r"[*/\\_#`~<>\[\]{}|]")
_QUOTED_LINE_RE = re.compile(r'^\s*(?:[-•]|\d+[.)])?\s*("(?:[^"\\]|\\.)+")\s*,?\s*$')
_KEY_VALUE_LINE_RE = re.compile(r'^\s*("[A-Za-z_ ]+"\s*:\s*.+?)\s*,?\s*$')
_FEEDBACK_KEYS = {"totalScore", "categoryScores", "strengths", "areasForImprovement", "finalAssessment"}


def sanitize_question(text: str) -> str:
    """Drop characters a voice assistant would read out literally."""
    return " ".join(_UNSAFE_CHARS_RE.sub(" ", text).split())


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return None


def _clean_json(json_str: str) -> str:
    cleaned = re.sub(r'^```(?:json)?\s*', '', json_str.strip(), flags=re.MULTILINE)
    cleaned = re.sub(r'```\s*$', '', cleaned, flags=re.MULTILINE)
    cleaned = re.sub(r'(?<!:)//.*?$', '', cleaned, flags=re.MULTILINE)
    cleaned = re.sub(r',\s*}', '}', cleaned)
    cleaned = re.sub(r',\s*]', ']', cleaned)
    return cleaned.strip()


def _bracketed_span(content: str, opening: str) -> str | None:
    start_idx = content.find(opening)
    if start_idx == -1:
        return None

    closing = _PAIRS[opening]
    depth = 0
    in_string = False
    escaped = False
    for idx in range(start_idx, len(content)):
        char = content[idx]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth == 0:
                return content[start_idx:idx + 1]

    end_idx = content.rfind(closing)
    if end_idx > start_idx:
        return content[start_idx:end_idx + 1]
    return None


def _parse_bracketed(content: str, opening: str) -> Any:
    span = _bracketed_span(content, opening)
    if span is None:
        return None
    value = _loads(span)
    if value is None:
        value = _loads(_clean_json(span))
    return value


def _as_questions(value: Any) -> List[str]:
    if isinstance(value, dict):
        value = value.get("questions")
    if not isinstance(value, list):
        return []

    questions = []
    for item in value:
        if isinstance(item, dict):
            item = item.get("question")
        if not isinstance(item, str):
            continue
        question = sanitize_question(item)
        if question:
            questions.append(question)
    return questions


def _quoted_lines(content: str) -> List[str]:
    found = []
    for line in content.splitlines():
        match = _QUOTED_LINE_RE.match(line)
        if not match:
            continue
        literal = _loads(match.group(1))
        found.append(literal if isinstance(literal, str) else match.group(1).strip('"'))
    return found


def repair_questions(raw: Any) -> List[str]:
    content = raw if isinstance(raw, str) else ("" if raw is None else str(raw))

    questions = _as_questions(_loads(content.strip()))
    if questions:
        return questions

    questions = _as_questions(_parse_bracketed(content, "["))
    if questions:
        return questions

    questions = _as_questions(_quoted_lines(content))
    if questions:
        return questions

    return [DEFAULT_QUESTION]


def _category_key(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower()).replace("and", "")


_CATEGORY_LOOKUP = {_category_key(name): name for name in FEEDBACK_CATEGORIES}


def _coerce_score(value: Any, default: int = FALLBACK_SCORE) -> int:
    if isinstance(value, bool):
        return default
    try:
        score = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if score != score:
        return default
    return int(round(min(100.0, max(0.0, score))))


def _coerce_text_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


def _collect_categories(raw_categories: Any) -> Dict[str, Dict[str, Any]]:
    collected: Dict[str, Dict[str, Any]] = {}

    if isinstance(raw_categories, dict):
        items = []
        for key, value in raw_categories.items():
            if isinstance(value, dict):
                items.append({"name": key, **value})
            else:
                items.append({"name": key, "score": value})
    elif isinstance(raw_categories, list):
        items = [item for item in raw_categories if isinstance(item, dict)]
    else:
        items = []

    for item in items:
        name = _CATEGORY_LOOKUP.get(_category_key(str(item.get("name", ""))))
        if name is None or name in collected:
            continue
        collected[name] = {
            "name": name,
            "score": _coerce_score(item.get("score")),
            "comment": str(item.get("comment") or ""),
        }
    return collected


def normalize_feedback(data: Dict[str, Any]) -> Dict[str, Any]:
    """Project a parsed evaluation onto the five fixed categories."""
    collected = _collect_categories(data.get("categoryScores", data.get("category_scores")))
    categories = [
        collected.get(name, {"name": name, "score": FALLBACK_SCORE, "comment": "Not assessed."})
        for name in FEEDBACK_CATEGORIES
    ]
    average = sum(c["score"] for c in categories) / len(categories)

    total = data.get("totalScore", data.get("total_score"))
    final_assessment = data.get("finalAssessment", data.get("final_assessment", ""))

    return {
        "totalScore": _coerce_score(total, default=int(round(average))),
        "categoryScores": categories,
        "strengths": _coerce_text_list(data.get("strengths")),
        "areasForImprovement": _coerce_text_list(
            data.get("areasForImprovement", data.get("areas_for_improvement"))
        ),
        "finalAssessment": final_assessment if isinstance(final_assessment, str) else str(final_assessment),
    }


def fallback_feedback() -> Dict[str, Any]:
    return {
        "totalScore": FALLBACK_SCORE,
        "categoryScores": [
            {"name": name, "score": FALLBACK_SCORE, "comment": FALLBACK_COMMENT}
            for name in FEEDBACK_CATEGORIES
        ],
        "strengths": [],
        "areasForImprovement": [],
        "finalAssessment": FALLBACK_ASSESSMENT,
    }


def _salvage_object(content: str) -> Dict[str, Any]:
    salvaged: Dict[str, Any] = {}
    for line in content.splitlines():
        match = _KEY_VALUE_LINE_RE.match(line)
        if not match:
            continue
        pair = _loads("{" + match.group(1) + "}")
        if isinstance(pair, dict):
            salvaged.update(pair)
    if _FEEDBACK_KEYS.intersection(salvaged):
        return salvaged
    return {}


def repair_feedback(raw: Any) -> Dict[str, Any]:
    content = raw if isinstance(raw, str) else ("" if raw is None else str(raw))

    value = _loads(content.strip())
    if isinstance(value, dict):
        return normalize_feedback(value)

    value = _parse_bracketed(content, "{")
    if isinstance(value, dict):
        return normalize_feedback(value)

    value = _salvage_object(content)
    if value:
        return normalize_feedback(value)

    return fallback_feedback()
