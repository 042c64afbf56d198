# mentor_assistant/model_providers/factory.py
"""
Factory for creating the chat gateway and the voice collaborators
"""

from typing import Optional
import logging

from .base import CaptureProvider, PlaybackProvider
from .failover_chat import FailoverChatProvider
from .gemini_chat import GeminiChatProvider

logger = logging.getLogger(__name__)


class ModelProviderFactory:
    """Factory for creating model providers"""

    @staticmethod
    def create_chat_provider(config, session=None) -> FailoverChatProvider:
        """Create the Gemini-backed failover gateway"""
        backend = GeminiChatProvider(
            model=config.gemini_model,
            base_url=config.gemini_base_url,
            timeout=config.request_timeout,
            session=session,
        )
        if not config.gemini_api_keys:
            logger.warning("❌ GEMINI_API_KEYS is empty - every slow-path answer will fail")
        else:
            logger.info(f"✅ Using Gemini {config.gemini_model} with {len(config.gemini_api_keys)} key(s)")

        return FailoverChatProvider(
            backend=backend,
            credentials=config.gemini_api_keys,
            temperature=config.temperature,
        )

    @staticmethod
    def _voice_client(config):
        if not config.enable_voice:
            logger.info("Voice disabled by configuration")
            return None
        if not config.openai_api_key:
            logger.warning("No OpenAI API key - voice input/output disabled")
            return None

        from openai import OpenAI
        return OpenAI(api_key=config.openai_api_key)

    @staticmethod
    def create_capture_provider(config) -> Optional[CaptureProvider]:
        """Create the microphone capture adapter, or None when voice is off"""
        client = ModelProviderFactory._voice_client(config)
        if client is None:
            return None

        try:
            from ..audio import WhisperCapture
        except OSError as e:
            # sounddevice raises OSError when PortAudio is missing
            logger.warning(f"❌ Audio input unavailable: {e}")
            return None

        return WhisperCapture(
            client,
            model=config.stt_model,
            sample_rate=config.sample_rate,
            max_seconds=config.max_capture_seconds,
        )

    @staticmethod
    def create_playback_provider(config) -> Optional[PlaybackProvider]:
        """Create the speech playback adapter, or None when voice is off"""
        client = ModelProviderFactory._voice_client(config)
        if client is None:
            return None

        try:
            from ..audio import OpenAISpeechPlayback
        except OSError as e:
            logger.warning(f"❌ Audio output unavailable: {e}")
            return None

        return OpenAISpeechPlayback(
            client,
            model=config.tts_model,
            voice=config.tts_voice,
            rate=config.speech_rate,
            volume=config.speech_volume,
        )
