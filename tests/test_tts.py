import os

import httpx
import pytest

from coach.errors import MissingCredentialError, RequestFailedError
from coach.tts import AudioCache, derive_tts_url, generate_speech

BASE_URL = "https://api.example.com/v1/chat/completions"
MP3 = b"ID3\x03fake-mp3-bytes"


def _audio(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=MP3, headers={"content-type": "audio/mpeg"})


@pytest.fixture
def cache():
    with AudioCache() as audio_cache:
        yield audio_cache


def test_derive_tts_url() -> None:
    assert derive_tts_url("https://api.openai.com/v1/chat/completions") == "https://api.openai.com/v1/audio/speech"
    assert derive_tts_url("http://localhost:8000/v1") == "http://localhost:8000/v1/audio/speech"
    assert derive_tts_url("http://localhost:8000/v1/") == "http://localhost:8000/v1/audio/speech"


def test_generates_and_writes_clip(endpoint, cache) -> None:
    fake = endpoint(_audio)
    clip = generate_speech("Hola", "sk-test", BASE_URL, cache, voice="nova", speed=0.75, http_client=fake.client)

    with open(clip.path, "rb") as f:
        assert f.read() == MP3
    request = fake.requests[0]
    assert str(request.url) == "https://api.example.com/v1/audio/speech"
    body = fake.last_json()
    assert body["model"] == "tts-1"
    assert body["input"] == "Hola"
    assert body["voice"] == "nova"
    assert body["speed"] == 0.75


def test_cache_hit_skips_request(endpoint, cache) -> None:
    fake = endpoint(_audio)
    first = generate_speech("Hola", "sk-test", BASE_URL, cache, http_client=fake.client)
    second = generate_speech("Hola", "sk-test", BASE_URL, cache, http_client=fake.client)
    assert second is first
    assert fake.calls == 1

    generate_speech("Hola", "sk-test", BASE_URL, cache, speed=0.75, http_client=fake.client)
    generate_speech("Hola", "sk-test", BASE_URL, cache, voice="alloy", http_client=fake.client)
    assert fake.calls == 3
    assert len(cache) == 3


def test_cached_clip_needs_no_key(endpoint, cache) -> None:
    fake = endpoint(_audio)
    clip = generate_speech("Hola", "sk-test", BASE_URL, cache, http_client=fake.client)
    assert generate_speech("Hola", "", BASE_URL, cache, http_client=fake.client) is clip


def test_missing_key_sends_nothing(endpoint, cache) -> None:
    fake = endpoint(_audio)
    with pytest.raises(MissingCredentialError):
        generate_speech("Hola", "", BASE_URL, cache, http_client=fake.client)
    assert fake.calls == 0
    assert len(cache) == 0


def test_error_status(endpoint, cache) -> None:
    fake = endpoint(lambda request: httpx.Response(400, json={"error": {"message": "Unknown voice"}}))
    with pytest.raises(RequestFailedError) as excinfo:
        generate_speech("Hola", "sk-test", BASE_URL, cache, voice="robot", http_client=fake.client)
    assert str(excinfo.value) == "TTS request failed: 400 - Unknown voice"
    assert len(cache) == 0


def test_clear_releases_files(endpoint) -> None:
    fake = endpoint(_audio)
    cache = AudioCache()
    clips = [generate_speech(text, "sk-test", BASE_URL, cache, http_client=fake.client) for text in ["uno", "dos"]]
    assert all(os.path.exists(clip.path) for clip in clips)

    cache.clear()

    assert len(cache) == 0
    assert all(clip.released for clip in clips)


def test_context_manager_releases_on_exit(endpoint) -> None:
    fake = endpoint(_audio)
    with AudioCache() as cache:
        clip = generate_speech("tres", "sk-test", BASE_URL, cache, http_client=fake.client)
        assert ("tres", 1.0, "nova") in cache
    assert clip.released
