"""Answer checking and audio-practice helpers."""

import re
from typing import List, Optional

from .errors import EmptyResultError
from .models import Exercise, PracticeSentence, StudyPlan

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\u00C0-\u024F\u1E00-\u1EFF ]")


def _same_answer(left: str, right: str) -> bool:
    return left.strip().lower() == right.strip().lower()


def check_answer(exercise: Exercise, response: str) -> Optional[bool]:
    """Compare a learner response to the exercise answer. None when there is nothing to grade."""
    if exercise.answer is None:
        return None
    return _same_answer(str(exercise.answer), response)


def answer_in_options(exercise: Exercise) -> bool:
    """True when the answer matches one of the options, or either is absent."""
    if exercise.answer is None or not exercise.options:
        return True
    return any(_same_answer(option, str(exercise.answer)) for option in exercise.options)


def sentences_from_plan(plan: StudyPlan) -> List[PracticeSentence]:
    imported = [
        PracticeSentence.from_sentence(sentence)
        for lesson in plan.lessons
        for sentence in lesson.sentences
    ]
    if not imported:
        raise EmptyResultError("Plan has no sentences to import.")
    return imported


def download_name(sentence: PracticeSentence) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("", sentence.target[:40]).strip()
    return f"{stem or 'sentence'}.mp3"
