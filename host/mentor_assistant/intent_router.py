"""Answers platform-information questions straight from the rules document."""

import logging
from typing import List, Optional, Sequence, Tuple

from mentor_assistant.rules import RulesMap

log = logging.getLogger(__name__)

# Declaration order is the match priority
DEFAULT_INTENTS: List[Tuple[str, Tuple[str, ...]]] = [
    ("platformname", ("who are you", "what is your name", "platform name")),
    ("contact", ("contact", "email", "reach", "support")),
    ("builtby", ("who built", "creator", "founder", "made this")),
    ("frontend", ("frontend", "ui built")),
    ("backend", ("backend", "server")),
    ("ai tools", ("ai tools", "tech used")),
    ("features", ("features", "what can you do")),
    ("roadmap", ("roadmap", "future", "coming soon")),
]


class IntentRouter:
    def __init__(self, intents: Optional[Sequence[Tuple[str, Sequence[str]]]] = None):
        self.intents = [
            (key.lower(), tuple(p.lower() for p in phrases))
            for key, phrases in (intents if intents is not None else DEFAULT_INTENTS)
        ]

    def route(self, query: str, rules: RulesMap) -> Optional[str]:
        """Returns the labelled rules answer, or None when the slow path should run."""
        q = (query or "").lower()

        for key, phrases in self.intents:
            if not any(p in q for p in phrases):
                continue
            answer = rules.get(key)
            if answer:
                log.info(f"🎯 Intent '{key}' answered from rules")
                return f"{key}: {answer}"

        return None
