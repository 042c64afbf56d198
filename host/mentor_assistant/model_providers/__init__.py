"""
Model provider implementations for the mentor assistant
"""

from .base import (
    ProviderError,
    TransientProviderError,
    ChatCompletionProvider,
    CaptureProvider,
    PlaybackProvider
)
from .failover_chat import (
    Answered,
    Exhausted,
    Fatal,
    GatewayOutcome,
    FailoverChatProvider
)
from .gemini_chat import GeminiChatProvider
from .factory import ModelProviderFactory

__all__ = [
    'ProviderError',
    'TransientProviderError',
    'ChatCompletionProvider',
    'CaptureProvider',
    'PlaybackProvider',
    'Answered',
    'Exhausted',
    'Fatal',
    'GatewayOutcome',
    'FailoverChatProvider',
    'GeminiChatProvider',
    'ModelProviderFactory'
]
