from dataclasses import dataclass, field, asdict
from typing import List, Optional, Dict, Any, Literal
import uuid


ExerciseType = Literal["cards", "fill", "order", "match"]
EXERCISE_TYPES = ("cards", "fill", "order", "match")


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class Sentence:
    """An example sentence in the language being learned."""
    target: str                             # Text in the target language
    translation: str                        # Translation in the learner's language
    phonetic: Optional[str] = None          # Pronunciation guide
    note: Optional[str] = None              # Grammar or usage tip

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass
class Exercise:
    """A single drill attached to a lesson."""
    type: ExerciseType = "cards"
    prompt: str = ""
    options: Optional[List[str]] = None     # Choices for "cards" style drills
    answer: Optional[str] = None            # Expected answer, if gradable

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass
class Lesson:
    """One topical unit of a study plan."""
    id: str                                 # Stable key, unique within a plan
    title: str
    topic: str
    summary: str
    basics: List[str] = field(default_factory=list)        # Usually 3 points
    sentences: List[Sentence] = field(default_factory=list)
    exercises: List[Exercise] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "topic": self.topic,
            "summary": self.summary,
            "basics": list(self.basics),
            "sentences": [s.to_dict() for s in self.sentences],
            "exercises": [e.to_dict() for e in self.exercises],
        }


@dataclass
class StudyPlan:
    """The full curriculum shown in the UI. Replaced wholesale on regeneration."""
    title: str
    steps: List[str] = field(default_factory=list)
    lessons: List[Lesson] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "steps": list(self.steps),
            "lessons": [lesson.to_dict() for lesson in self.lessons],
        }


@dataclass
class Settings:
    """Connection and language preferences. An empty api_key blocks generation."""
    api_key: str = ""
    model: str = ""
    base_url: str = ""
    user_language: str = ""
    target_language: str = ""

    # Persisted with the same camelCase keys the plan JSON uses
    _KEYS = {
        "api_key": "apiKey",
        "model": "model",
        "base_url": "baseUrl",
        "user_language": "userLanguage",
        "target_language": "targetLanguage",
    }

    def to_dict(self) -> Dict[str, Any]:
        return {stored: getattr(self, attr) for attr, stored in self._KEYS.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], defaults: "Settings") -> "Settings":
        """Build settings from a stored blob, keeping defaults for missing keys."""
        values = {}
        for attr, stored in cls._KEYS.items():
            value = data.get(stored) if isinstance(data, dict) else None
            values[attr] = str(value) if value is not None else getattr(defaults, attr)
        return cls(**values)

    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


@dataclass
class PracticeSentence(Sentence):
    """A sentence in the audio-practice list."""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @classmethod
    def from_sentence(cls, sentence: Sentence) -> "PracticeSentence":
        return cls(
            target=sentence.target,
            translation=sentence.translation,
            phonetic=sentence.phonetic,
            note=sentence.note,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PracticeSentence":
        item = cls(
            target=str(data.get("target", "")),
            translation=str(data.get("translation", "")),
            phonetic=data.get("phonetic"),
            note=data.get("note"),
        )
        if data.get("id"):
            item.id = str(data["id"])
        return item
