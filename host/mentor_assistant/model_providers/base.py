# mentor_assistant/model_providers/base.py
"""
Base interfaces for model providers and the voice collaborators
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


class ProviderError(Exception):
    """Backend failure that will recur identically on any credential"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class TransientProviderError(ProviderError):
    """Rate-limited, overloaded or unreachable backend; worth another credential"""


class ChatCompletionProvider(ABC):
    """Base interface for generative-language backends"""

    @abstractmethod
    def complete(
        self,
        contents: List[Dict[str, Any]],
        credential: str,
        temperature: float = 0.7,
        **kwargs
    ) -> Optional[str]:
        """Return the first candidate text, or None when the reply has none.

        Raises TransientProviderError or ProviderError on failure.
        """
        pass


class CaptureProvider(ABC):
    """Platform voice capture: reports one final transcript per capture"""

    @abstractmethod
    def start(
        self,
        on_result: Callable[[str], None],
        on_error: Callable[[Exception], None],
        on_end: Callable[[], None],
    ) -> None:
        """Begin capturing; exactly one of on_result / on_error / on_end fires"""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Abort the current capture"""
        pass


class PlaybackProvider(ABC):
    """Platform voice playback"""

    @abstractmethod
    def speak(
        self,
        text: str,
        on_start: Callable[[], None],
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        """Start speaking text; on_end or on_error fires when it finishes"""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop any in-flight utterance"""
        pass
