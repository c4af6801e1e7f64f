"""
Configuration for LexiMind.

The only secret is the OpenAI API key, read from the environment or from a
.env file at the project root:

    OPENAI_API_KEY=sk-...

Everything else (models, voice, where the wordbook lives) is a constant here.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

from .logger import logger

# Fast chat model for JSON definitions, stories and chat
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_IMAGE_MODEL = "dall-e-3"
DEFAULT_IMAGE_SIZE = "1024x1024"
# tts-1 for speed; "pcm" output is 24 kHz mono 16-bit little-endian
DEFAULT_SPEECH_MODEL = "tts-1"
DEFAULT_SPEECH_VOICE = "nova"

DATA_DIR = Path.home() / ".leximind"
COLLECTION_STORAGE_KEY = "leximind_saved"


@dataclass
class Settings:
    """Runtime settings shared by the gateway, the wordbook and the UI."""
    api_key: Optional[str] = None
    chat_model: str = DEFAULT_CHAT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_size: str = DEFAULT_IMAGE_SIZE
    speech_model: str = DEFAULT_SPEECH_MODEL
    speech_voice: str = DEFAULT_SPEECH_VOICE
    data_dir: Path = field(default_factory=lambda: DATA_DIR)

    @property
    def images_dir(self) -> Path:
        return self.data_dir / "images"

    @property
    def collection_path(self) -> Path:
        return self.data_dir / f"{COLLECTION_STORAGE_KEY}.json"


def mask_key(key: str) -> str:
    """Show only the first 8 and last 4 characters of a secret."""
    return f"{key[:8]}...{key[-4:]}" if len(key) > 12 else "***"


def load_settings() -> Settings:
    logger.env("Loading environment variables from .env file...")
    if load_dotenv():
        logger.env_success("dotenv file loaded successfully")
    else:
        logger.warning("No .env file found or file is empty")

    settings = Settings(api_key=os.getenv("OPENAI_API_KEY"))
    logger.env(f"Chat model: {settings.chat_model}, image model: {settings.image_model}, "
               f"speech model: {settings.speech_model}")
    logger.env(f"Data directory: {settings.data_dir}")
    return settings


def create_client(settings: Settings) -> Optional[OpenAI]:
    """Build the OpenAI client, or return None when no API key is configured."""
    if not settings.api_key:
        logger.env_error("OPENAI_API_KEY not found in environment!")
        logger.warning("Definitions, stories and chat will be unavailable")
        return None

    logger.env_success(f"OPENAI_API_KEY found: {mask_key(settings.api_key)}")
    client = OpenAI(api_key=settings.api_key)
    logger.env_success("OpenAI client initialized successfully")
    return client
