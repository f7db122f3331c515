"""
Plan normalization.

Model output is untrusted and often partial. These functions coerce
whatever came back (a JSON string or an already-parsed value) into a
complete StudyPlan, substituting defaults field by field so a plan with
some bad fields still keeps the good ones.
"""

import json
from typing import Any, Dict, List, Optional

from .logger import logger
from .models import EXERCISE_TYPES, Exercise, Lesson, Sentence, StudyPlan

DEFAULT_LESSON_TITLE = "New topic"
DEFAULT_LESSON_TOPIC = "Language"
DEFAULT_LESSON_SUMMARY = "Learn the core of this topic."
DEFAULT_BASICS = ["Key points for this part."]
DEFAULT_SENTENCE_TARGET = "Example sentence missing."
DEFAULT_SENTENCE_TRANSLATION = "Translation missing."
DEFAULT_EXERCISE_PROMPT = "Choose the correct answer."


def to_text(value: Any) -> str:
    """Stringify a JSON value the way it would print in the UI."""
    if isinstance(value, str):
        return value
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _or_default(data: Dict[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value


def _as_dict(value: Any) -> Dict[str, Any]:
    # A non-object entry behaves like an entry with every field missing
    return value if isinstance(value, dict) else {}


def map_sentence(raw: Any) -> Sentence:
    data = _as_dict(raw)
    return Sentence(
        target=_or_default(data, "target", DEFAULT_SENTENCE_TARGET),
        translation=_or_default(data, "translation", DEFAULT_SENTENCE_TRANSLATION),
        phonetic=data.get("phonetic"),
        note=data.get("note"),
    )


def map_exercise(raw: Any, default_prompt: str = DEFAULT_EXERCISE_PROMPT) -> Exercise:
    """Map one raw exercise object, defaulting type to "cards"."""
    data = _as_dict(raw)
    exercise_type = data.get("type")
    if exercise_type not in EXERCISE_TYPES:
        exercise_type = "cards"

    options: Optional[List[str]] = None
    if isinstance(data.get("options"), list):
        options = [to_text(option) for option in data["options"]]

    return Exercise(
        type=exercise_type,
        prompt=_or_default(data, "prompt", default_prompt),
        options=options,
        answer=data.get("answer"),
    )


def map_lesson(raw: Any, index: int) -> Lesson:
    """Map one raw lesson; index is 0-based and only used for the synthesized id."""
    data = _as_dict(raw)

    basics = data.get("basics")
    sentences = data.get("sentences")
    exercises = data.get("exercises")

    return Lesson(
        id=_or_default(data, "id", f"lesson-{index + 1}"),
        title=_or_default(data, "title", DEFAULT_LESSON_TITLE),
        topic=_or_default(data, "topic", DEFAULT_LESSON_TOPIC),
        summary=_or_default(data, "summary", DEFAULT_LESSON_SUMMARY),
        basics=[to_text(item) for item in basics] if isinstance(basics, list) else list(DEFAULT_BASICS),
        sentences=[map_sentence(s) for s in sentences] if isinstance(sentences, list) else [],
        exercises=[map_exercise(e) for e in exercises] if isinstance(exercises, list) else [],
    )


def normalize_plan(raw: Any, fallback: StudyPlan) -> StudyPlan:
    """
    Convert raw model output into a StudyPlan. Never raises.

    Returns `fallback` itself when the input is not a JSON object or
    anything goes wrong while mapping it.
    """
    try:
        parsed = json.loads(raw) if isinstance(raw, (str, bytes, bytearray)) else raw
        if not isinstance(parsed, dict):
            logger.warning(f"Plan output is not a JSON object ({type(parsed).__name__}), using fallback plan")
            return fallback

        lessons_raw = parsed.get("lessons")
        if isinstance(lessons_raw, list):
            lessons = [map_lesson(lesson, index) for index, lesson in enumerate(lessons_raw)]
        else:
            lessons = fallback.lessons

        steps_raw = parsed.get("steps")
        steps = [to_text(step) for step in steps_raw] if isinstance(steps_raw, list) else fallback.steps

        plan = StudyPlan(
            title=_or_default(parsed, "title", fallback.title),
            steps=steps,
            lessons=lessons,
        )
        logger.debug(f"Normalized plan '{plan.title}': {len(plan.steps)} steps, {len(plan.lessons)} lessons")
        return plan

    except Exception as e:
        logger.error(f"Plan parse failed: {e}", exc_info=True)
        return fallback


def plan_from_dict(data: Any, fallback: StudyPlan) -> StudyPlan:
    """Load a stored plan blob; stored plans go through the same normalization."""
    return normalize_plan(data, fallback)
