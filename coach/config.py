"""
Configuration for Language Coach.

Values can be seeded from a .env file in the working directory:

    OPENAI_API_KEY=sk-...
    COACH_MODEL=gpt-4o-mini
    COACH_BASE_URL=https://api.openai.com/v1/chat/completions
    COACH_DATA_DIR=~/.language_coach

The .env values only provide defaults. Whatever the user saves in the
settings form is stored locally and wins on the next start.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from .logger import logger, mask_secret
from .models import Settings

logger.env("Loading environment variables from .env file...")
if load_dotenv():
    logger.env_success("dotenv file loaded")
else:
    logger.debug("No .env file found, using built-in defaults")

DEFAULT_CHAT_MODEL = os.getenv("COACH_MODEL", "gpt-4o-mini")
DEFAULT_BASE_URL = os.getenv("COACH_BASE_URL", "https://api.openai.com/v1/chat/completions")
DATA_DIR = Path(os.getenv("COACH_DATA_DIR", "~/.language_coach")).expanduser()

CHAT_TEMPERATURE = 0.7

# Storage namespace keys
SETTINGS_KEY = "ll.settings"
GOAL_KEY = "ll.goal"
PLAN_KEY = "ll.plan"
AUDIO_SENTENCES_KEY = "ll.audioSentences"

DEFAULT_GOAL = "Reach conversational B1 for daily life and travel."

DEFAULT_SETTINGS = Settings(
    api_key=os.getenv("OPENAI_API_KEY", ""),
    model=DEFAULT_CHAT_MODEL,
    base_url=DEFAULT_BASE_URL,
    user_language="English",
    target_language="Spanish (es-ES)",
)

# OpenAI TTS voices: alloy, echo, fable, onyx, nova, shimmer
TTS_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
DEFAULT_TTS_MODEL = "tts-1"
DEFAULT_TTS_VOICE = "nova"
NORMAL_SPEED = 1.0
SLOW_SPEED = 0.75

if DEFAULT_SETTINGS.api_key:
    logger.env_success(f"OPENAI_API_KEY found: {mask_secret(DEFAULT_SETTINGS.api_key)}")
logger.env(f"Default chat model: {DEFAULT_CHAT_MODEL}")
logger.env(f"Data directory: {DATA_DIR}")
