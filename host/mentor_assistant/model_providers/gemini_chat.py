# mentor_assistant/model_providers/gemini_chat.py
"""
Gemini generateContent provider implementation
"""

import logging
import requests
from typing import Any, Dict, List, Optional
import time

from .base import ChatCompletionProvider, ProviderError, TransientProviderError
from ..utils import mask_credential

logger = logging.getLogger(__name__)

# 429 = rate limited, 503 = model overloaded
TRANSIENT_STATUS_CODES = {429, 503}


class GeminiChatProvider(ChatCompletionProvider):
    """Google Generative Language REST provider"""

    def __init__(
        self,
        model: str = "gemini-1.5-flash-latest",
        base_url: str = "https://generativelanguage.googleapis.com",
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"

    def complete(
        self,
        contents: List[Dict[str, Any]],
        credential: str,
        temperature: float = 0.7,
        **kwargs
    ) -> Optional[str]:
        """Create a completion using Gemini"""
        start_time = time.time()

        payload = {
            "contents": self._convert_messages(contents),
            "generationConfig": {"temperature": temperature},
        }

        try:
            response = self.session.post(
                self.endpoint,
                params={"key": credential},
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            elapsed = time.time() - start_time
            raise TransientProviderError(f"Gemini request timed out after {elapsed:.1f}s")
        except requests.exceptions.RequestException as e:
            raise TransientProviderError(f"Gemini connection failed: {e}")

        if response.status_code in TRANSIENT_STATUS_CODES:
            raise TransientProviderError(
                f"Gemini busy (status {response.status_code})", status=response.status_code
            )

        if not response.ok:
            raise ProviderError(self._error_message(response), status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.warning("Gemini returned a non-JSON success body")
            return None

        elapsed = time.time() - start_time
        logger.debug(f"Gemini responded in {elapsed:.2f}s with key {mask_credential(credential)}")
        return self._extract_text(data)

    def _convert_messages(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Convert role/content turns to Gemini contents"""
        gemini_contents = []

        for msg in messages:
            role = msg.get("role", "user")
            # Gemini only knows "user" and "model"; context turns ride as user turns
            gemini_role = "model" if role == "assistant" else "user"
            gemini_contents.append({
                "role": gemini_role,
                "parts": [{"text": msg.get("content", "")}],
            })

        return gemini_contents

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return text or None

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            error = response.json().get("error", {})
            message = error.get("message")
        except (ValueError, AttributeError):
            message = None
        return message or response.reason or f"HTTP {response.status_code}"
