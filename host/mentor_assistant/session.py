"""
MentorSession owns everything one open chat widget needs: the history, the
rules loader, the failover gateway and the speech coordinator. It is created
when the widget opens and torn down with close().
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from mentor_assistant.config import Config
from mentor_assistant.conversation import ConversationHistory, Turn
from mentor_assistant.intent_router import IntentRouter
from mentor_assistant.model_providers.base import CaptureProvider, PlaybackProvider
from mentor_assistant.model_providers.factory import ModelProviderFactory
from mentor_assistant.model_providers.failover_chat import (
    Answered,
    Exhausted,
    FailoverChatProvider,
    GatewayOutcome,
)
from mentor_assistant.rules import RulesLoader
from mentor_assistant.speech import SpeechCoordinator
from mentor_assistant.state import SpeechMode

log = logging.getLogger(__name__)

QUICK_ACTIONS: Tuple[str, ...] = (
    "Analyze my coding pattern",
    "Suggest today's practice",
    "Contest strategy tips",
    "Mock interview prep",
)


@dataclass(frozen=True)
class SubmissionResult:
    """What the UI renders after one submission"""
    rendered: str
    outcome: Optional[GatewayOutcome]  # None when an intent answered
    history: Tuple[Turn, ...]


class MentorSession:
    """One chat widget session: fast path, slow path and voice."""

    def __init__(
        self,
        config: Config,
        gateway: FailoverChatProvider,
        rules_loader: RulesLoader,
        router: Optional[IntentRouter] = None,
        capture: Optional[CaptureProvider] = None,
        playback: Optional[PlaybackProvider] = None,
        on_voice_result: Optional[Callable[[SubmissionResult], None]] = None,
    ) -> None:
        self.config = config
        self.gateway = gateway
        self.rules_loader = rules_loader
        self.router = router or IntentRouter()
        self.on_voice_result = on_voice_result

        self.history = ConversationHistory()
        if config.greeting:
            self.history.append(Turn.assistant(config.greeting))

        self.speech = SpeechCoordinator(
            capture=capture,
            playback=playback,
            on_transcript=self._dispatch_transcript,
        )

        self._submit_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="mentor-submit")
        self._closed = False

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "MentorSession":
        """Wire a session from configuration"""
        return cls(
            config,
            gateway=ModelProviderFactory.create_chat_provider(config),
            rules_loader=RulesLoader(config.rules_location, timeout=config.request_timeout),
            capture=ModelProviderFactory.create_capture_provider(config),
            playback=ModelProviderFactory.create_playback_provider(config),
            **kwargs,
        )

    # ------------------------------------------------------------------ #
    @property
    def speech_mode(self) -> SpeechMode:
        return self.speech.mode

    @property
    def busy(self) -> bool:
        return self._submit_lock.locked()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------ #
    # --------------------------  core logic  -------------------------- #
    # ------------------------------------------------------------------ #
    def submit_user_text(self, text: str) -> Optional[SubmissionResult]:
        """Answer one user message; None if it was empty or another is in flight"""
        if self._closed:
            raise RuntimeError("session is closed")
        if not text or not text.strip():
            return None

        if not self._submit_lock.acquire(blocking=False):
            log.warning("Submission dropped - another answer is still in flight")
            return None
        try:
            return self._process(text)
        finally:
            self._submit_lock.release()

    def submit_quick_action(self, index: int) -> Optional[SubmissionResult]:
        return self.submit_user_text(QUICK_ACTIONS[index])

    def _process(self, text: str) -> SubmissionResult:
        rules = self.rules_loader.load()
        prior = self.history.snapshot()
        self.history.append(Turn.user(text))

        outcome: Optional[GatewayOutcome] = None
        routed = self.router.route(text, rules)
        if routed is not None:
            rendered = routed
        else:
            self.gateway.rules_document = self.rules_loader.document
            outcome = self.gateway.answer(text, prior)
            rendered = outcome.text
            log.info(f"💬 {type(outcome).__name__}: {rendered[:100]}")

        self.history.append(Turn.assistant(rendered))

        # Fatal errors are shown, not read aloud
        if outcome is None or isinstance(outcome, (Answered, Exhausted)):
            self.speech.speak(rendered)

        return SubmissionResult(rendered, outcome, self.history.snapshot())

    # ------------------------------------------------------------------ #
    # -----------------------------  voice  ---------------------------- #
    # ------------------------------------------------------------------ #
    def start_listening(self) -> bool:
        return self.speech.start_listening()

    def stop_listening(self) -> bool:
        return self.speech.stop_listening()

    def stop_speaking(self) -> bool:
        return self.speech.stop_speaking()

    def _dispatch_transcript(self, text: str) -> None:
        if self._closed:
            return
        self._executor.submit(self._submit_transcript, text)

    def _submit_transcript(self, text: str) -> None:
        try:
            result = self.submit_user_text(text)
        except Exception as e:
            log.error(f"Voice submission failed: {e}")
            return
        if result is None or self.on_voice_result is None:
            return
        if self._closed:
            log.info("Session closed while answering - voice result discarded")
            return
        self.on_voice_result(result)

    # ------------------------------------------------------------------ #
    def close(self) -> None:
        """Tear down: cancel capture/playback and stop dispatching transcripts"""
        if self._closed:
            return
        log.info("Closing mentor session...")
        self._closed = True
        self.speech.shutdown()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def __enter__(self) -> "MentorSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
