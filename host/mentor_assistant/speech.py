# mentor_assistant/speech.py
"""
Voice capture / playback coordination.

Listening and speaking are mutually exclusive. Capture and playback events
arrive from platform threads at arbitrary times, so every capture and every
utterance gets a generation token; callbacks carrying a superseded token are
dropped instead of clobbering the current mode.
"""

import logging
from typing import Callable, Optional

from .model_providers.base import CaptureProvider, PlaybackProvider
from .state import SpeechMode, SpeechState
from .utils import strip_markup

logger = logging.getLogger(__name__)


class SpeechCoordinator:
    """Idle / Listening / Speaking state machine over capture and playback"""

    def __init__(
        self,
        state: Optional[SpeechState] = None,
        capture: Optional[CaptureProvider] = None,
        playback: Optional[PlaybackProvider] = None,
        on_transcript: Optional[Callable[[str], None]] = None,
    ):
        self.state = state or SpeechState()
        self.capture = capture
        self.playback = playback
        self.on_transcript = on_transcript
        self._generation = 0

    @property
    def mode(self) -> SpeechMode:
        return self.state.get_mode()

    def _is_current(self, token: int, expected: SpeechMode) -> bool:
        return token == self._generation and self.state.get_mode() == expected

    # ------------------------------------------------------------------ #
    # ---------------------------  capture  ---------------------------- #
    # ------------------------------------------------------------------ #
    def start_listening(self) -> bool:
        """Begin a capture; ignored unless idle"""
        if self.capture is None:
            logger.warning("Voice capture is not available")
            return False

        with self.state.mode_lock:
            if self.state.get_mode() != SpeechMode.IDLE:
                logger.info(f"Start-listening ignored while {self.state.get_mode().value}")
                return False
            self._generation += 1
            token = self._generation
            self.state.set_mode(SpeechMode.LISTENING)

            # stop_listening() waits on the lock until the adapter has started
            try:
                self.capture.start(
                    on_result=lambda transcript: self._capture_result(token, transcript),
                    on_error=lambda error: self._capture_error(token, error),
                    on_end=lambda: self._capture_end(token),
                )
            except Exception as e:
                self._capture_error(token, e)
                return False

        logger.info("🎤 Listening...")
        return True

    def stop_listening(self) -> bool:
        """Abort the current capture"""
        with self.state.mode_lock:
            if self.state.get_mode() != SpeechMode.LISTENING:
                return False
            self._generation += 1
            self.state.set_mode(SpeechMode.IDLE)

        self._stop_capture()
        return True

    def _capture_result(self, token: int, transcript: str):
        with self.state.mode_lock:
            if not self._is_current(token, SpeechMode.LISTENING):
                logger.debug("Ignoring stale transcript")
                return
            try:
                text = (transcript or "").strip()
                if text and self.on_transcript is not None:
                    logger.info(f"Transcript: {text[:100]}")
                    self.on_transcript(text)
            except Exception as e:
                logger.error(f"Transcript handler failed: {e}")
            finally:
                self.state.set_mode(SpeechMode.IDLE)

    def _capture_error(self, token: int, error: Exception):
        with self.state.mode_lock:
            if not self._is_current(token, SpeechMode.LISTENING):
                return
            logger.warning(f"Capture error: {error}")
            self.state.set_mode(SpeechMode.IDLE)

    def _capture_end(self, token: int):
        with self.state.mode_lock:
            if not self._is_current(token, SpeechMode.LISTENING):
                return
            logger.info("Capture ended without a transcript")
            self.state.set_mode(SpeechMode.IDLE)

    def _stop_capture(self):
        try:
            self.capture.stop()
        except Exception as e:
            logger.warning(f"Capture stop failed: {e}")

    # ------------------------------------------------------------------ #
    # ---------------------------  playback  --------------------------- #
    # ------------------------------------------------------------------ #
    def speak(self, text: str) -> bool:
        """Play text if idle; later requests are dropped, never queued"""
        cleaned = strip_markup(text)
        if not cleaned:
            return False
        if self.playback is None:
            return False

        with self.state.mode_lock:
            if self.state.get_mode() != SpeechMode.IDLE:
                logger.info(f"Speech dropped while {self.state.get_mode().value}")
                return False
            self._generation += 1
            token = self._generation
            self.state.set_mode(SpeechMode.SPEAKING)

            logger.info(f"Speaking: {cleaned[:50]}...")
            try:
                self.playback.speak(
                    cleaned,
                    on_start=lambda: logger.debug("Playback started"),
                    on_end=lambda: self._playback_end(token),
                    on_error=lambda error: self._playback_error(token, error),
                )
            except Exception as e:
                self._playback_error(token, e)
                return False
        return True

    def stop_speaking(self) -> bool:
        """Cancel the current utterance and go idle immediately"""
        with self.state.mode_lock:
            if self.state.get_mode() != SpeechMode.SPEAKING:
                return False
            self._generation += 1
            self.state.set_mode(SpeechMode.IDLE)

        self._cancel_playback()
        return True

    def _playback_end(self, token: int):
        with self.state.mode_lock:
            if not self._is_current(token, SpeechMode.SPEAKING):
                logger.debug("Ignoring stale playback end")
                return
            logger.info("Audio playback completed")
            self.state.set_mode(SpeechMode.IDLE)

    def _playback_error(self, token: int, error: Exception):
        with self.state.mode_lock:
            if not self._is_current(token, SpeechMode.SPEAKING):
                return
            logger.warning(f"Playback error: {error}")
            self.state.set_mode(SpeechMode.IDLE)

    def _cancel_playback(self):
        try:
            self.playback.cancel()
        except Exception as e:
            logger.warning(f"Playback cancel failed: {e}")

    # ------------------------------------------------------------------ #
    def shutdown(self):
        """Cancel whatever is in flight and return to idle"""
        with self.state.mode_lock:
            previous = self.state.get_mode()
            self._generation += 1
            self.state.set_mode(SpeechMode.IDLE)

        if previous == SpeechMode.LISTENING and self.capture is not None:
            self._stop_capture()
        elif previous == SpeechMode.SPEAKING and self.playback is not None:
            self._cancel_playback()
