"""
Extraction of JSON payloads from free-form model text.

Models wrap JSON in Markdown fences, add a sentence of prose before or
after it, or return an object where an array was asked for. The helpers
here try a few strategies in a fixed order and only fail when none works.
"""

import json
import re
from typing import Any, Dict, List, Optional

from .errors import ParseError
from .logger import logger
from .models import Exercise, PracticeSentence
from .normalize import map_exercise, to_text

_FENCE_OPEN = re.compile(r"```json", re.IGNORECASE)
_FENCE_LINE = re.compile(r"^\s*```[\w-]*\s*$")
_BRACKET_SPAN = re.compile(r"\[[\s\S]*\]")
_BRACE_SPAN = re.compile(r"\{[\s\S]*\}")

# json.loads raises RecursionError on very deeply nested input
JSON_ERRORS = (ValueError, RecursionError)


def strip_fences(text: str) -> str:
    """Remove ```json / ``` markers wherever they appear."""
    return _FENCE_OPEN.sub("", text).replace("```", "").strip()


def strip_fence_lines(text: str) -> str:
    """Drop lines that are nothing but a code-fence delimiter."""
    kept = [line for line in text.split("\n") if not _FENCE_LINE.match(line)]
    return "\n".join(kept).strip()


def _try_exercise_array(text: str) -> Optional[List[Any]]:
    try:
        parsed = json.loads(text)
    except JSON_ERRORS:
        return None
    if isinstance(parsed, list):
        return parsed
    if isinstance(parsed, dict) and isinstance(parsed.get("exercises"), list):
        return parsed["exercises"]
    return None


def parse_exercises(text: str) -> List[Any]:
    """
    Extract a JSON array of raw exercise objects from model text.

    Strategies, first success wins:
    1. strip fence markers and parse the whole text;
    2. parse the span from the first "[" to the last "]";
    3. drop fence-only lines from the original text and parse again.

    An object with an "exercises" array counts as that array. A valid
    empty array is returned as-is; deciding that it is useless is up to
    the caller.

    Raises:
        ParseError: if no strategy yields an array.
    """
    cleaned = strip_fences(text)

    direct = _try_exercise_array(cleaned)
    if direct is not None:
        return direct

    match = _BRACKET_SPAN.search(cleaned)
    if match:
        spanned = _try_exercise_array(match.group(0))
        if spanned is not None:
            logger.debug("Exercises recovered from bracket span")
            return spanned

    fallback = _try_exercise_array(strip_fence_lines(text))
    if fallback is not None:
        logger.debug("Exercises recovered after dropping fence lines")
        return fallback

    logger.error(f"Failed to parse exercises from model text:\n{text}")
    raise ParseError("Model response was not valid JSON exercises.")


def exercises_from_text(text: str) -> List[Exercise]:
    """Parse and map exercises; prompts default to "Practice item N"."""
    return [
        map_exercise(raw, default_prompt=f"Practice item {index + 1}")
        for index, raw in enumerate(parse_exercises(text))
    ]


# ---------------------------------------------------------------------------
# Audio-practice sentences
# ---------------------------------------------------------------------------

def _loads_with_span(text: str, span: "re.Pattern[str]", what: str) -> Any:
    cleaned = strip_fences(text)
    try:
        return json.loads(cleaned)
    except JSON_ERRORS:
        match = span.search(cleaned)
        if not match:
            logger.error(f"No {what} found in model text:\n{text}")
            raise ParseError("Could not parse AI response as JSON.")
        try:
            return json.loads(match.group(0))
        except JSON_ERRORS as e:
            logger.error(f"Invalid {what} in model text:\n{text}")
            raise ParseError("Could not parse AI response as JSON.") from e


def _optional_text(value: Any) -> Optional[str]:
    return to_text(value) if value else None


def _practice_sentence(item: Dict[str, Any], default_target: str = "") -> PracticeSentence:
    target = item.get("target")
    translation = item.get("translation")
    return PracticeSentence(
        target=default_target if target is None else to_text(target),
        translation="" if translation is None else to_text(translation),
        phonetic=_optional_text(item.get("phonetic")),
        note=_optional_text(item.get("note")),
    )


def parse_practice_sentences(text: str) -> List[PracticeSentence]:
    """Extract a JSON array of practice sentences."""
    parsed = _loads_with_span(text, _BRACKET_SPAN, "sentence array")
    if not isinstance(parsed, list):
        raise ParseError("AI response was not an array.")
    return [_practice_sentence(item if isinstance(item, dict) else {}) for item in parsed]


def parse_practice_sentence(text: str, entered: str) -> PracticeSentence:
    """Extract a single sentence object; a missing target falls back to what the user entered."""
    parsed = _loads_with_span(text, _BRACE_SPAN, "sentence object")
    if not isinstance(parsed, dict):
        raise ParseError("Could not parse AI response.")
    return _practice_sentence(parsed, default_target=entered)
