"""
Prompt templates sent to the chat completion endpoint.

Each builder returns the ordered system/user message list for one action.
The JSON layouts described here are what the normalizer and parsers
expect back.
"""

from typing import Dict, List

from .models import Lesson, Settings

Message = Dict[str, str]

PLAN_SYSTEM_PROMPT = (
    "You are a concise language tutor creating compact study plans. "
    "Respond with pure JSON, no markdown."
)

EXERCISES_SYSTEM_PROMPT = (
    "You are a concise language tutor. Respond with JSON only: an array of 2-3 exercises. "
    "Each exercise has: type ('cards' | 'fill' | 'order' | 'match'), prompt (string), "
    "options? (array), answer? (string). Keep prompts short and relevant to the lesson."
)

EXPLAIN_SYSTEM_PROMPT = (
    "Explain the lesson clearly for a learner. Keep it under 120 words. "
    "Use the learner's language. Highlight tricky points. Respond with plain text only."
)

JSON_ONLY_SYSTEM_PROMPT = "You are a language tutor. Respond with pure JSON only, no markdown."


def plan_messages(goal: str, settings: Settings) -> List[Message]:
    native = settings.user_language
    target = settings.target_language
    return [
        {"role": "system", "content": PLAN_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Goal: {goal}. Native language: {native}. Target: {target}. "
                f"Write all fields (title, steps, summaries, basics, exercises, notes) in {native} "
                f"except the target-language sentence text (use the 'target' field), which must stay in {target}. "
                "Output JSON with keys: title, steps (array), lessons (array). "
                "Each lesson needs: id, title, topic, summary, basics (array of 3 points), "
                f"sentences (3 items with target text in {target}, translation in {native}, phonetic), "
                "exercises (2 items with type, prompt, options?, answer?). "
                "Keep it short and classroom-ready."
            ),
        },
    ]


def exercises_messages(lesson: Lesson, settings: Settings) -> List[Message]:
    sentences = " | ".join(s.target for s in lesson.sentences)
    return [
        {"role": "system", "content": EXERCISES_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Target language: {settings.target_language}. Learner language: {settings.user_language}. "
                f"Lesson topic: {lesson.title} ({lesson.topic}). Basics: {'; '.join(lesson.basics)}. "
                f"Sentences: {sentences}. Return only JSON array of new exercises."
            ),
        },
    ]


def explain_messages(lesson: Lesson, settings: Settings) -> List[Message]:
    sentences = " | ".join(f"{s.target} ({s.translation})" for s in lesson.sentences)
    return [
        {"role": "system", "content": EXPLAIN_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Learner language: {settings.user_language}. Target: {settings.target_language}. "
                f"Lesson: {lesson.title} ({lesson.topic}). Summary: {lesson.summary}. "
                f"Basics: {'; '.join(lesson.basics)}. Sentences: {sentences}."
            ),
        },
    ]


def practice_sentences_messages(settings: Settings, count: int = 5) -> List[Message]:
    native = settings.user_language
    target = settings.target_language
    return [
        {"role": "system", "content": JSON_ONLY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Generate {count} useful practice sentences for a student learning {target} (native: {native}). "
                f'Return a JSON array where each item has: "target" (sentence in {target}), '
                f'"translation" (in {native}), "phonetic" (pronunciation guide), '
                f'"note" (brief grammar/usage tip in {native}). Keep sentences practical and conversational.'
            ),
        },
    ]


def practice_sentence_messages(text: str, settings: Settings) -> List[Message]:
    native = settings.user_language
    target = settings.target_language
    return [
        {"role": "system", "content": JSON_ONLY_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f'The user is learning {target} (native: {native}). They entered: "{text}". '
                f"Determine if this is in {target} or {native}. Return a single JSON object with: "
                f'"target" (the sentence in {target}), "translation" (in {native}), '
                f'"phonetic" (pronunciation guide for the target), "note" (brief grammar/usage tip in {native}). '
                'If the input is in the target language, use it as "target" and translate. '
                "If in the native language, translate it to the target language."
            ),
        },
    ]
