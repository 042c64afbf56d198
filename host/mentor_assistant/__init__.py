# mentor_assistant/__init__.py
"""
Mentor Assistant Package
"""

from .config import Config, setup_logging
from .state import SpeechMode, SpeechState
from .conversation import ConversationHistory, Speaker, Turn
from .rules import RulesLoader, parse_rules
from .intent_router import IntentRouter
from .model_providers import Answered, Exhausted, Fatal, FailoverChatProvider
from .speech import SpeechCoordinator
from .session import MentorSession, SubmissionResult, QUICK_ACTIONS
from .utils import strip_markup, strip_tags

__all__ = [
    'Config',
    'setup_logging',
    'SpeechMode',
    'SpeechState',
    'ConversationHistory',
    'Speaker',
    'Turn',
    'RulesLoader',
    'parse_rules',
    'IntentRouter',
    'Answered',
    'Exhausted',
    'Fatal',
    'FailoverChatProvider',
    'SpeechCoordinator',
    'MentorSession',
    'SubmissionResult',
    'QUICK_ACTIONS',
    'strip_markup',
    'strip_tags',
]
