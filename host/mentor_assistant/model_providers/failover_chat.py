# mentor_assistant/model_providers/failover_chat.py
"""
Failover chat provider that walks an ordered credential pool
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Union

from .base import ChatCompletionProvider, ProviderError, TransientProviderError
from ..conversation import Speaker, Turn
from ..utils import mask_credential, strip_tags

logger = logging.getLogger(__name__)

NO_CREDENTIALS_MESSAGE = "no credentials configured"
NO_REPLY_MESSAGE = "no reply produced"
EXHAUSTED_MESSAGE = "All AI connections are currently busy. Please try again in a moment."


@dataclass(frozen=True)
class Answered:
    """The backend produced text"""
    text: str


@dataclass(frozen=True)
class Exhausted:
    """Every credential failed transiently"""
    fallback_text: str = EXHAUSTED_MESSAGE

    @property
    def text(self) -> str:
        return self.fallback_text


@dataclass(frozen=True)
class Fatal:
    """Configuration error or a failure no other credential would fix"""
    error_message: str

    @property
    def text(self) -> str:
        return f"API error: {self.error_message}"


GatewayOutcome = Union[Answered, Exhausted, Fatal]


class FailoverChatProvider:
    """Chat gateway that retries transient failures across credentials"""

    def __init__(
        self,
        backend: ChatCompletionProvider,
        credentials: Sequence[str],
        temperature: float = 0.7,
        rules_document: str = "",
    ):
        self.backend = backend
        self.credentials = tuple(c for c in credentials if c)
        self.temperature = temperature
        self.rules_document = rules_document
        self.call_count = 0
        self.last_attempts = 0

    def build_contents(self, user_text: str, history: Sequence[Turn]) -> List[Dict[str, Any]]:
        """Context turn, then the history in order, then the new user turn"""
        contents = [{"role": "system", "content": f"Platform Info:\n{self.rules_document}"}]
        for turn in history:
            role = "assistant" if turn.speaker == Speaker.ASSISTANT else "user"
            contents.append({"role": role, "content": strip_tags(turn.text)})
        contents.append({"role": "user", "content": strip_tags(user_text)})
        return contents

    def answer(self, user_text: str, history: Sequence[Turn]) -> GatewayOutcome:
        """Deliver the conversation to the backend, one credential at a time"""
        self.call_count += 1
        self.last_attempts = 0
        logger.info(f"=== Failover answer() call #{self.call_count} ===")

        if not self.credentials:
            logger.error("🚫 No API credentials configured")
            return Fatal(NO_CREDENTIALS_MESSAGE)

        contents = self.build_contents(user_text, history)

        for credential in self.credentials:
            masked = mask_credential(credential)
            self.last_attempts += 1
            start_time = time.time()
            logger.info(f"Trying API key {masked}")

            try:
                text = self.backend.complete(contents, credential, temperature=self.temperature)
            except TransientProviderError as e:
                logger.warning(f"🔄 Key {masked} failed ({e.message}). Switching to the next key.")
                continue
            except ProviderError as e:
                logger.error(f"⚠️ API error with key {masked}: {e.message}")
                return Fatal(e.message)
            except Exception as e:
                logger.error(f"💥 Unexpected backend failure with key {masked}: {e}")
                return Fatal(str(e) or type(e).__name__)

            elapsed = time.time() - start_time
            logger.info(f"✅ Success with key {masked} in {elapsed:.1f}s")
            if not text or not text.strip():
                return Answered(NO_REPLY_MESSAGE)
            return Answered(text)

        logger.error(f"🚫 All {len(self.credentials)} API keys failed")
        return Exhausted()
