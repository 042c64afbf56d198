# mentor_assistant/state.py
"""
Speech state for the mentor assistant
"""

import threading
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class SpeechMode(Enum):
    """Voice subsystem modes; exactly one is active"""
    IDLE = "idle"                    # Neither capturing nor playing
    LISTENING = "listening"          # Capturing user speech
    SPEAKING = "speaking"            # Playing an answer


class SpeechState:
    """Thread-safe holder for the current speech mode"""

    def __init__(self):
        self.mode = SpeechMode.IDLE
        self.mode_lock = threading.RLock()

    def set_mode(self, new_mode: SpeechMode):
        """Thread-safe mode setter with logging"""
        with self.mode_lock:
            old_mode = self.mode
            self.mode = new_mode
            if old_mode != new_mode:
                logger.info(f"Mode transition: {old_mode.value} -> {new_mode.value}")

    def get_mode(self) -> SpeechMode:
        """Thread-safe mode getter"""
        with self.mode_lock:
            return self.mode
