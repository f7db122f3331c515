"""
Local speech for lesson sentences.

Voices come from the edge-tts catalogue; picking one for the learner's
target language is a pure function over whatever list is available, so
it can be tested without a network.
"""

import asyncio
import os
import re
import tempfile
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import edge_tts

from .logger import logger, Timer

_CODE_IN_LABEL = re.compile(r"\(([a-z0-9-]+)\)", re.IGNORECASE)


@dataclass(frozen=True)
class Voice:
    id: str                 # Identifier passed to the synthesizer
    name: str               # Display name
    lang: str               # BCP 47 tag, e.g. "nl-NL"


def language_code(target_language: str) -> Optional[str]:
    """Return the code from labels like "Dutch (nl-NL)", lowercased."""
    match = _CODE_IN_LABEL.search(target_language)
    return match.group(1).lower() if match else None


def resolve_voice(target_language: str, voices: Sequence[Voice]) -> Optional[Voice]:
    """
    Pick a voice for a target-language label.

    Precedence, first match in list order at each step:
    1. voice tag equals the code (case-insensitive);
    2. voice tag starts with the code's first two characters;
    3. voice name contains the lowercased label;
    4. the first voice.
    """
    if not voices:
        return None

    label = target_language.lower()
    key = language_code(target_language) or label

    for voice in voices:
        if voice.lang.lower() == key:
            return voice
    for voice in voices:
        if voice.lang.lower().startswith(key[:2]):
            return voice
    for voice in voices:
        if label in voice.name.lower():
            return voice
    return voices[0]


def _voice_from_entry(entry: Dict[str, Any]) -> Voice:
    short_name = entry.get("ShortName", "")
    return Voice(
        id=short_name,
        name=entry.get("FriendlyName") or short_name,
        lang=entry.get("Locale", ""),
    )


def list_voices() -> List[Voice]:
    """Fetch the synthesis voice catalogue. Returns [] when unavailable."""
    try:
        entries = asyncio.run(edge_tts.list_voices())
    except Exception as e:
        logger.tts_error(f"Voice list unavailable: {e}")
        return []
    voices = [_voice_from_entry(entry) for entry in entries]
    logger.tts(f"{len(voices)} synthesis voices available")
    return voices


def speak_to_file(text: str, voice: Voice) -> str:
    """Synthesize text with a local voice into a temporary mp3. Caller deletes it."""
    fd, path = tempfile.mkstemp(suffix=".mp3", prefix="coach_voice_")
    os.close(fd)

    async def _runner() -> None:
        communicate = edge_tts.Communicate(text=text, voice=voice.id)
        await communicate.save(path)

    logger.tts(f"→ Speaking with {voice.id}: {text[:40]}")
    with Timer() as timer:
        asyncio.run(_runner())
    logger.tts_complete(path, duration_ms=timer.duration_ms)
    return path
