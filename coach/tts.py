"""
Text-to-speech via the OpenAI-compatible audio endpoint.

The audio endpoint sits next to the chat endpoint:

    https://api.openai.com/v1/chat/completions -> https://api.openai.com/v1/audio/speech

Clips are written to temporary mp3 files and cached per (text, speed,
voice) in an AudioCache owned by the audio-practice screen. Clearing the
cache deletes every file it holds.
"""

import os
import tempfile
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import httpx
from openai import APIConnectionError, APIStatusError

from .api import api_root, build_client, describe_status_error, require_api_key
from .config import DEFAULT_BASE_URL, DEFAULT_TTS_MODEL, DEFAULT_TTS_VOICE, NORMAL_SPEED
from .errors import RequestFailedError
from .logger import logger, Timer

CacheKey = Tuple[str, float, str]


def derive_tts_url(base_url: str) -> str:
    """Replace a trailing /chat/completions with /audio/speech, or append it."""
    return api_root(base_url) + "/audio/speech"


@dataclass
class AudioClip:
    """A playable mp3 on disk. Call release() once nothing plays it any more."""
    path: str
    text: str
    voice: str
    speed: float

    @property
    def released(self) -> bool:
        return not os.path.exists(self.path)

    def release(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.tts_error(f"Could not remove {self.path}: {e}")


class AudioCache:
    """
    Unbounded clip cache for one audio-practice session.

    Use as a context manager, or call clear() when the screen goes away.
    """

    def __init__(self) -> None:
        self._clips: Dict[CacheKey, AudioClip] = {}

    def __len__(self) -> int:
        return len(self._clips)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._clips

    def get(self, text: str, speed: float, voice: str) -> Optional[AudioClip]:
        return self._clips.get((text, speed, voice))

    def put(self, clip: AudioClip) -> None:
        self._clips[(clip.text, clip.speed, clip.voice)] = clip

    def clear(self) -> None:
        count = len(self._clips)
        for clip in self._clips.values():
            clip.release()
        self._clips.clear()
        if count:
            logger.tts(f"Released {count} cached clips")

    def __enter__(self) -> "AudioCache":
        return self

    def __exit__(self, *args) -> None:
        self.clear()


def generate_speech(
    text: str,
    api_key: str,
    base_url: str,
    cache: AudioCache,
    voice: str = DEFAULT_TTS_VOICE,
    speed: float = NORMAL_SPEED,
    http_client: Optional[httpx.Client] = None,
) -> AudioClip:
    """
    Return a clip for text, from the cache or from the audio endpoint.

    Raises:
        MissingCredentialError: API key empty (only checked on a cache miss).
        RequestFailedError: non-success status or transport failure.
    """
    cached = cache.get(text, speed, voice)
    if cached is not None:
        logger.tts(f"Cache hit ({voice}, {speed}x): {text[:40]}")
        return cached

    require_api_key(api_key)
    base_url = base_url or DEFAULT_BASE_URL
    client = build_client(api_key, base_url, http_client)
    endpoint = derive_tts_url(base_url)

    logger.api_call(endpoint, model=DEFAULT_TTS_MODEL)
    try:
        with Timer() as timer:
            response = client.audio.speech.create(
                model=DEFAULT_TTS_MODEL,
                input=text,
                voice=voice,
                speed=speed,
            )
    except APIStatusError as e:
        message = describe_status_error("TTS request failed", e)
        logger.tts_error(message)
        raise RequestFailedError(message, status_code=e.status_code) from e
    except APIConnectionError as e:
        logger.tts_error(f"TTS request could not be sent: {e}")
        raise RequestFailedError(f"TTS request failed: {e}") from e
    logger.api_response(endpoint, duration_ms=timer.duration_ms)

    fd, path = tempfile.mkstemp(suffix=".mp3", prefix="coach_speech_")
    with os.fdopen(fd, "wb") as f:
        f.write(response.content)

    clip = AudioClip(path=path, text=text, voice=voice, speed=speed)
    cache.put(clip)
    logger.tts_complete(path, duration_ms=timer.duration_ms)
    return clip
