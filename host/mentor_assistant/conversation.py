# mentor_assistant/conversation.py
"""
Conversation history for one widget session
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)


class Speaker(Enum):
    """Who produced a turn"""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One message exchanged between the user and the assistant"""
    speaker: Speaker
    text: str
    timestamp: datetime = field(default_factory=datetime.now)

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(Speaker.USER, text)

    @classmethod
    def assistant(cls, text: str) -> "Turn":
        return cls(Speaker.ASSISTANT, text)


class ConversationHistory:
    """Append-only, insertion-ordered sequence of turns"""

    def __init__(self):
        self._turns: List[Turn] = []
        self._lock = threading.Lock()

    def append(self, turn: Turn):
        """Add a turn to the end of the history"""
        if not isinstance(turn, Turn):
            raise TypeError(f"expected Turn, got {type(turn).__name__}")
        with self._lock:
            self._turns.append(turn)
        logger.debug(f"History +{turn.speaker.value} turn ({len(self._turns)} total)")

    def snapshot(self) -> Tuple[Turn, ...]:
        """Copy of the turns so far; later appends are not visible through it"""
        with self._lock:
            return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.snapshot())
