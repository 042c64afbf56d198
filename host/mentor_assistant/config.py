# mentor_assistant/config.py
"""
Configuration management for the mentor assistant
"""

import os
import sys
import logging
from dataclasses import dataclass
from typing import Tuple
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_GREETING = (
    "Hi! I'm your NEXTFAANG AI Mentor.\n\n"
    "To get started, send your code and include:\n"
    "- Problem the code solves\n"
    "- Programming language\n"
    "- Specific questions or concerns"
)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ["true", "1", "yes", "on"]


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass
class Config:
    """Configuration settings for the mentor assistant"""
    # === GENERATIVE BACKEND ===
    gemini_api_keys: Tuple[str, ...]
    gemini_model: str
    gemini_base_url: str
    temperature: float
    request_timeout: float

    # === PLATFORM RULES ===
    rules_location: str
    greeting: str

    # === VOICE CONFIGURATION ===
    enable_voice: bool
    openai_api_key: str
    stt_model: str
    tts_model: str
    tts_voice: str
    speech_rate: float
    speech_volume: float
    sample_rate: int
    max_capture_seconds: float

    # === LOGGING CONFIGURATION ===
    log_level: str
    log_file: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""
        return cls(
            # === GENERATIVE BACKEND ===
            gemini_api_keys=_env_list("GEMINI_API_KEYS"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-1.5-flash-latest"),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"),
            temperature=float(os.getenv("CHAT_TEMPERATURE", "0.7")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30.0")),

            # === PLATFORM RULES ===
            rules_location=os.getenv("RULES_LOCATION", "rules.txt"),
            greeting=os.getenv("MENTOR_GREETING", DEFAULT_GREETING),

            # === VOICE CONFIGURATION ===
            enable_voice=_env_bool("ENABLE_VOICE", "true"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            stt_model=os.getenv("STT_MODEL", "whisper-1"),
            tts_model=os.getenv("TTS_MODEL", "tts-1"),
            tts_voice=os.getenv("TTS_VOICE", "nova"),
            # Matches the widget's utterance settings (rate 0.95, volume 0.8)
            speech_rate=float(os.getenv("SPEECH_RATE", "0.95")),
            speech_volume=float(os.getenv("SPEECH_VOLUME", "0.8")),
            sample_rate=int(os.getenv("SAMPLE_RATE", "16000")),
            max_capture_seconds=float(os.getenv("MAX_CAPTURE_SECONDS", "15.0")),

            # === LOGGING CONFIGURATION ===
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "mentor_assistant.log"),
        )


def setup_logging(config: Config):
    """Configure logging with proper formatting"""
    # Launchers that capture stdout want the shorter format
    force_console = os.getenv("MENTOR_CONSOLE_OUTPUT") == "1"

    file_handler = logging.FileHandler(config.log_file, encoding='utf-8')
    console_handler = logging.StreamHandler(sys.stdout)
    handlers = [file_handler, console_handler]

    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    if force_console:
        log_format = '%(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format=log_format,
        handlers=handlers,
        force=True  # Reconfigure even if already configured
    )

    # Reduce noise from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
