# mentor_assistant/audio.py
"""
Platform voice adapters: microphone capture with OpenAI transcription and
OpenAI text-to-speech played through the default output device
"""

import io
import logging
import queue
import threading
from typing import Callable, Optional

import numpy as np
import sounddevice as sd
import soundfile as sf
from openai import OpenAI

from .model_providers.base import CaptureProvider, PlaybackProvider

logger = logging.getLogger(__name__)


class WhisperCapture(CaptureProvider):
    """Records until trailing silence, then transcribes the clip"""

    def __init__(
        self,
        client: OpenAI,
        model: str = "whisper-1",
        sample_rate: int = 16000,
        max_seconds: float = 15.0,
        silence_threshold: float = 0.03,
        silence_duration: float = 1.5,
        language: str = "en",
    ):
        self.client = client
        self.model = model
        self.sample_rate = sample_rate
        self.max_seconds = max_seconds
        self.silence_threshold = silence_threshold
        self.silence_duration = silence_duration
        self.language = language
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self, on_result, on_error, on_end) -> None:
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event, on_result, on_error, on_end),
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    @staticmethod
    def get_audio_energy(audio_data: np.ndarray) -> float:
        """Calculate RMS energy of audio data"""
        return float(np.sqrt(np.mean(audio_data.astype(float) ** 2)))

    def _record(self, stop_event: threading.Event) -> Optional[np.ndarray]:
        chunks: "queue.Queue[np.ndarray]" = queue.Queue()
        block = int(self.sample_rate * 0.03)  # 30ms chunks

        def callback(indata, frames, time_info, status):
            if status:
                logger.warning(f"Audio callback status: {status}")
            chunks.put(indata.copy())

        frames = []
        speech_started = False
        silent_blocks = 0
        needed_silence = int(self.silence_duration / 0.03)
        max_blocks = int(self.max_seconds / 0.03)

        with sd.InputStream(samplerate=self.sample_rate, blocksize=block, dtype="float32",
                            channels=1, callback=callback):
            while len(frames) < max_blocks and not stop_event.is_set():
                try:
                    chunk = chunks.get(timeout=0.1)
                except queue.Empty:
                    continue
                frames.append(chunk)
                if self.get_audio_energy(chunk) > self.silence_threshold:
                    speech_started = True
                    silent_blocks = 0
                elif speech_started:
                    silent_blocks += 1
                    if silent_blocks >= needed_silence:
                        break

        if stop_event.is_set() or not speech_started:
            return None
        return np.concatenate(frames)

    def _transcribe(self, samples: np.ndarray) -> str:
        buffer = io.BytesIO()
        sf.write(buffer, samples, self.sample_rate, format="WAV")
        buffer.seek(0)
        buffer.name = "capture.wav"
        response = self.client.audio.transcriptions.create(
            model=self.model,
            file=buffer,
            language=self.language,
        )
        return response.text.strip()

    def _run(self, stop_event, on_result, on_error, on_end):
        try:
            samples = self._record(stop_event)
            if samples is None:
                on_end()
                return
            text = self._transcribe(samples)
        except Exception as e:
            logger.error(f"STT error: {e}")
            on_error(e)
            return

        if stop_event.is_set():
            return
        if text:
            on_result(text)
        else:
            on_end()


class OpenAISpeechPlayback(PlaybackProvider):
    """Synthesises speech with OpenAI TTS and plays it with sounddevice"""

    def __init__(
        self,
        client: OpenAI,
        model: str = "tts-1",
        voice: str = "nova",
        rate: float = 0.95,
        volume: float = 0.8,
    ):
        self.client = client
        self.model = model
        self.voice = voice
        self.rate = rate
        self.volume = volume
        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def speak(
        self,
        text: str,
        on_start: Callable[[], None],
        on_end: Callable[[], None],
        on_error: Callable[[Exception], None],
    ) -> None:
        self._cancel_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(text, self._cancel_event, on_start, on_end, on_error),
            daemon=True,
        )
        self._thread.start()

    def cancel(self) -> None:
        self._cancel_event.set()
        sd.stop()

    def join(self, timeout: Optional[float] = None):
        if self._thread is not None:
            self._thread.join(timeout)

    def _synthesize(self, text: str) -> bytes:
        response = self.client.audio.speech.create(
            model=self.model,
            voice=self.voice,
            input=text,
            response_format="wav",
            speed=self.rate,
        )
        return response.read()

    def _run(self, text, cancel_event, on_start, on_end, on_error):
        try:
            audio_data = self._synthesize(text)
            if cancel_event.is_set():
                logger.info("Speech interrupted before playback")
                return

            data, sample_rate = sf.read(io.BytesIO(audio_data), dtype="float32")
            on_start()
            sd.play(data * self.volume, sample_rate)
            sd.wait()
        except Exception as e:
            logger.error(f"TTS error: {e}")
            on_error(e)
            return

        if not cancel_event.is_set():
            on_end()
