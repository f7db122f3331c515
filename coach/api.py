"""
Chat-completion services for Language Coach.

This module handles:
- The single tutor call (one request, no retries)
- Study plan generation
- Appending exercises to a lesson
- Lesson explanations
- Audio-practice sentence generation

Requests go through the OpenAI SDK pointed at the configured base URL,
so any chat-completion compatible endpoint works. The API key comes from
Settings, not from the environment.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
from openai import OpenAI, APIConnectionError, APIStatusError

from .config import CHAT_TEMPERATURE, DEFAULT_BASE_URL
from .errors import (
    CoachError, EmptyResponseError, EmptyResultError,
    MissingCredentialError, RequestFailedError,
)
from .logger import logger, mask_secret, Timer
from .models import Exercise, Lesson, PracticeSentence, Settings, StudyPlan
from .normalize import normalize_plan
from .parsing import JSON_ERRORS, exercises_from_text, parse_practice_sentence, parse_practice_sentences
from . import prompts

CHAT_SUFFIX = "/chat/completions"


# ---------------------------------------------------------------------------
# Client setup
# ---------------------------------------------------------------------------

def api_root(base_url: str) -> str:
    """Strip a trailing /chat/completions (or trailing slashes) from the base URL."""
    if base_url.endswith(CHAT_SUFFIX):
        return base_url[: -len(CHAT_SUFFIX)]
    return base_url.rstrip("/")


def require_api_key(api_key: str) -> None:
    if not api_key or not api_key.strip():
        raise MissingCredentialError()


def build_client(api_key: str, base_url: str, http_client: Optional[httpx.Client] = None) -> OpenAI:
    """
    Create an OpenAI client for one call.

    Retries are disabled: every operation is a single best-effort request
    and failures go straight back to the caller.
    """
    logger.debug(f"Building client for {api_root(base_url)} with key {mask_secret(api_key)}")
    return OpenAI(
        api_key=api_key,
        base_url=api_root(base_url),
        max_retries=0,
        http_client=http_client,
    )


def server_message(body: str) -> Optional[str]:
    """Return error.message from a JSON error body, if there is one."""
    try:
        data = json.loads(body)
    except JSON_ERRORS:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return str(message)
    return None


def describe_status_error(prefix: str, error: APIStatusError) -> str:
    body = error.response.text
    message = server_message(body)
    if message:
        return f"{prefix}: {error.status_code} - {message}"
    return f"{prefix}: {error.status_code} {body}"


# ---------------------------------------------------------------------------
# Tutor call
# ---------------------------------------------------------------------------

def extract_text_content(content: Any) -> str:
    """
    Flatten message content to text.

    Content is either a string or a list of parts; parts that are strings
    or carry a "text" field contribute their text, anything else adds "".
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        pieces = []
        for part in content:
            if isinstance(part, str):
                pieces.append(part)
            elif isinstance(part, dict) and part.get("text") is not None:
                pieces.append(str(part["text"]))
        return "".join(pieces)
    return ""


def _first_message_content(data: Any) -> Any:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message")
    return message.get("content") if isinstance(message, dict) else None


def call_tutor(
    messages: List[Dict[str, str]],
    settings: Settings,
    http_client: Optional[httpx.Client] = None,
) -> str:
    """
    Send one chat completion request and return the reply text.

    Raises:
        MissingCredentialError: API key empty; nothing is sent.
        RequestFailedError: non-success status or transport failure.
        EmptyResponseError: the reply had no text.
    """
    require_api_key(settings.api_key)

    url = settings.base_url or DEFAULT_BASE_URL
    client = build_client(settings.api_key, url, http_client)
    payload = {
        "model": settings.model,
        "temperature": CHAT_TEMPERATURE,
        "messages": messages,
    }

    logger.api_call(url, model=settings.model)
    try:
        with Timer() as timer:
            # Post to the configured URL as-is; it may not end in /chat/completions
            response = client.post(url, cast_to=httpx.Response, body=payload)
    except APIStatusError as e:
        message = describe_status_error("Model request failed", e)
        logger.api_error(message)
        raise RequestFailedError(message, status_code=e.status_code) from e
    except APIConnectionError as e:
        logger.api_error(f"Model request could not be sent: {e}")
        raise RequestFailedError(f"Model request failed: {e}") from e
    logger.api_response(url, duration_ms=timer.duration_ms)

    try:
        data = response.json()
    except JSON_ERRORS as e:
        logger.api_error(f"Response body is not JSON: {response.text[:200]}")
        raise RequestFailedError("Model response was not valid JSON.", status_code=response.status_code) from e

    content = extract_text_content(_first_message_content(data))
    if not content:
        raise EmptyResponseError()
    logger.debug(f"Tutor replied with {len(content)} chars")
    return content


# ---------------------------------------------------------------------------
# Study plan
# ---------------------------------------------------------------------------

def generate_plan(
    goal: str,
    settings: Settings,
    fallback: StudyPlan,
    http_client: Optional[httpx.Client] = None,
) -> StudyPlan:
    """
    Ask the tutor for a new plan and normalize whatever comes back.

    Request errors propagate. Unusable output never does: it yields
    `fallback` (or a mix of model data and defaults).
    """
    logger.api(f"generate_plan() for {settings.target_language}")
    content = call_tutor(prompts.plan_messages(goal, settings), settings, http_client)
    plan = normalize_plan(content, fallback)
    if plan is fallback:
        logger.warning("Model output unusable, keeping fallback plan")
    else:
        logger.success(f"Plan generated: {plan.title} ({len(plan.lessons)} lessons)")
    return plan


def _target_lesson(plan: StudyPlan, lesson_index: int) -> int:
    if not plan.lessons:
        raise CoachError("No lesson found to update.")
    return lesson_index if 0 <= lesson_index < len(plan.lessons) else 0


def request_exercises(
    plan: StudyPlan,
    lesson_index: int,
    settings: Settings,
    http_client: Optional[httpx.Client] = None,
) -> Tuple[int, List[Exercise]]:
    """
    Generate more exercises for one lesson without touching the plan.

    An out-of-range index targets the first lesson. Returns the index
    actually used and the new exercises.

    Raises:
        CoachError: the plan has no lessons.
        ParseError: the reply held no recoverable JSON array.
        EmptyResultError: the array was empty.
    """
    lesson_index = _target_lesson(plan, lesson_index)
    lesson = plan.lessons[lesson_index]

    logger.api(f"request_exercises() for lesson '{lesson.id}'")
    content = call_tutor(prompts.exercises_messages(lesson, settings), settings, http_client)
    new_exercises = exercises_from_text(content)
    if not new_exercises:
        raise EmptyResultError("Model returned no exercises.")
    return lesson_index, new_exercises


def add_exercises(
    plan: StudyPlan,
    lesson_index: int,
    settings: Settings,
    http_client: Optional[httpx.Client] = None,
) -> List[Exercise]:
    """Generate more exercises and append them to one lesson in place. Returns the new exercises."""
    lesson_index, new_exercises = request_exercises(plan, lesson_index, settings, http_client)
    lesson = plan.lessons[lesson_index]
    lesson.exercises.extend(new_exercises)
    logger.success(f"Added {len(new_exercises)} exercises to '{lesson.id}'")
    return new_exercises


def explain_lesson(lesson: Lesson, settings: Settings, http_client: Optional[httpx.Client] = None) -> str:
    logger.api(f"explain_lesson() for '{lesson.id}'")
    content = call_tutor(prompts.explain_messages(lesson, settings), settings, http_client)
    return content.strip()


# ---------------------------------------------------------------------------
# Audio-practice sentences
# ---------------------------------------------------------------------------

def generate_practice_sentences(
    settings: Settings,
    count: int = 5,
    http_client: Optional[httpx.Client] = None,
) -> List[PracticeSentence]:
    content = call_tutor(prompts.practice_sentences_messages(settings, count), settings, http_client)
    sentences = parse_practice_sentences(content)
    logger.success(f"Generated {len(sentences)} practice sentences")
    return sentences


def create_practice_sentence(
    text: str,
    settings: Settings,
    http_client: Optional[httpx.Client] = None,
) -> PracticeSentence:
    """Turn free text in either language into a practice sentence."""
    entered = text.strip()
    if not entered:
        raise CoachError("Enter a sentence first.")
    content = call_tutor(prompts.practice_sentence_messages(entered, settings), settings, http_client)
    return parse_practice_sentence(content, entered)
