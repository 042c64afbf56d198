#!/usr/bin/env python3
"""
MentorSession tests - fast path, slow path, history and voice wiring
"""

import dataclasses
import sys
import tempfile
import threading
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from fakes import FakeCapture, FakePlayback, ScriptedBackend  # noqa: E402
from mentor_assistant.config import Config  # noqa: E402
from mentor_assistant.conversation import Speaker  # noqa: E402
from mentor_assistant.model_providers.base import ProviderError, TransientProviderError  # noqa: E402
from mentor_assistant.model_providers.failover_chat import (  # noqa: E402
    Answered,
    Exhausted,
    FailoverChatProvider,
    Fatal,
)
from mentor_assistant.rules import RulesLoader  # noqa: E402
from mentor_assistant.session import QUICK_ACTIONS, MentorSession  # noqa: E402
from mentor_assistant.state import SpeechMode  # noqa: E402

RULES_TEXT = "platformname: NEXTFAANG\ncontact: help@example.com\nbuiltby: Team X\n"


class ExplodingGateway(FailoverChatProvider):
    """Fails the test if the slow path is taken"""

    def __init__(self):
        super().__init__(ScriptedBackend(), ("key",))

    def answer(self, user_text, history):
        raise AssertionError("slow path must not be invoked")


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        rules_path = Path(self.tmp.name) / "rules.txt"
        rules_path.write_text(RULES_TEXT, encoding="utf-8")

        self.config = dataclasses.replace(
            Config.from_env(),
            gemini_api_keys=("key-1", "key-2"),
            rules_location=str(rules_path),
            greeting="Hi! I'm your <strong>mentor</strong>.",
            enable_voice=False,
        )
        self.capture = FakeCapture()
        self.playback = FakePlayback()

    def make_session(self, backend=None, gateway=None, **kwargs):
        if gateway is None:
            gateway = FailoverChatProvider(backend or ScriptedBackend(), self.config.gemini_api_keys)
        session = MentorSession(
            self.config,
            gateway=gateway,
            rules_loader=RulesLoader(self.config.rules_location),
            capture=self.capture,
            playback=self.playback,
            **kwargs,
        )
        self.addCleanup(session.close)
        return session


class TestSubmission(SessionTestCase):

    def test_greeting_seeds_history(self):
        session = self.make_session()
        turns = session.history.snapshot()
        self.assertEqual(len(turns), 1)
        self.assertEqual(turns[0].speaker, Speaker.ASSISTANT)

    def test_no_greeting(self):
        self.config = dataclasses.replace(self.config, greeting="")
        self.assertEqual(len(self.make_session().history), 0)

    def test_intent_answer_skips_gateway(self):
        session = self.make_session(gateway=ExplodingGateway())

        result = session.submit_user_text("How can I contact support?")

        self.assertEqual(result.rendered, "contact: help@example.com")
        self.assertIsNone(result.outcome)
        self.assertEqual([t.text for t in result.history[-2:]],
                         ["How can I contact support?", "contact: help@example.com"])
        self.assertEqual(self.playback.spoken, ["contact: help@example.com"])

    def test_slow_path_gets_full_history_then_new_turn(self):
        backend = ScriptedBackend("First answer", "Second answer")
        session = self.make_session(backend)

        session.submit_user_text("Explain BFS")
        self.playback.end()
        result = session.submit_user_text("And DFS?")

        self.assertEqual(result.outcome, Answered("Second answer"))
        contents = backend.calls[1]["contents"]
        self.assertEqual(contents[0], {"role": "system", "content": f"Platform Info:\n{RULES_TEXT}"})
        self.assertEqual(contents[1:], [
            {"role": "assistant", "content": "Hi! I'm your mentor."},
            {"role": "user", "content": "Explain BFS"},
            {"role": "assistant", "content": "First answer"},
            {"role": "user", "content": "And DFS?"},
        ])
        self.assertEqual(len(result.history), 5)

    def test_intent_without_rules_entry_goes_to_gateway(self):
        backend = ScriptedBackend("Our roadmap is secret.")
        session = self.make_session(backend)

        result = session.submit_user_text("what's on the roadmap?")

        self.assertEqual(result.outcome, Answered("Our roadmap is secret."))
        self.assertEqual(len(backend.calls), 1)

    def test_missing_rules_document_still_answers(self):
        self.config = dataclasses.replace(self.config, rules_location="/nonexistent/rules.txt")
        backend = ScriptedBackend("Sure.")
        session = self.make_session(backend)

        result = session.submit_user_text("contact?")

        self.assertEqual(result.rendered, "Sure.")
        self.assertEqual(backend.calls[0]["contents"][0]["content"], "Platform Info:\n")

    def test_exhausted_is_rendered_and_spoken(self):
        busy = TransientProviderError("busy", status=503)
        session = self.make_session(ScriptedBackend(busy, busy))

        result = session.submit_user_text("help me with DP")

        self.assertIsInstance(result.outcome, Exhausted)
        self.assertEqual(result.history[-1].text, result.outcome.fallback_text)
        self.assertEqual(self.playback.spoken, [result.outcome.fallback_text])

    def test_fatal_is_rendered_not_spoken(self):
        session = self.make_session(ScriptedBackend(ProviderError("API key not valid")))

        result = session.submit_user_text("help me with DP")

        self.assertEqual(result.outcome, Fatal("API key not valid"))
        self.assertEqual(result.rendered, "API error: API key not valid")
        self.assertEqual(self.playback.spoken, [])

    def test_empty_submission_ignored(self):
        session = self.make_session(gateway=ExplodingGateway())
        self.assertIsNone(session.submit_user_text("   "))
        self.assertEqual(len(session.history), 1)

    def test_submission_while_busy_is_dropped(self):
        session = self.make_session()
        session._submit_lock.acquire()
        try:
            self.assertTrue(session.busy)
            self.assertIsNone(session.submit_user_text("hello"))
        finally:
            session._submit_lock.release()
        self.assertEqual(len(session.history), 1)

    def test_quick_action(self):
        backend = ScriptedBackend("Practice two pointers today.")
        session = self.make_session(backend)

        result = session.submit_quick_action(1)

        self.assertEqual(result.history[-2].text, QUICK_ACTIONS[1])
        self.assertEqual(backend.calls[0]["contents"][-1]["content"], "Suggest today's practice")

    def test_closed_session_rejects_submissions(self):
        session = self.make_session()
        session.close()
        with self.assertRaises(RuntimeError):
            session.submit_user_text("hello")


class TestVoiceWiring(SessionTestCase):

    def test_transcript_is_answered_and_spoken(self):
        delivered = threading.Event()
        results = []

        def on_voice_result(result):
            results.append(result)
            delivered.set()

        session = self.make_session(gateway=ExplodingGateway(), on_voice_result=on_voice_result)

        self.assertTrue(session.start_listening())
        self.assertEqual(session.speech_mode, SpeechMode.LISTENING)
        self.capture.result("who built this?")

        self.assertTrue(delivered.wait(5))
        self.assertEqual(results[0].rendered, "builtby: Team X")
        self.assertEqual(self.playback.spoken, ["builtby: Team X"])
        self.assertEqual(session.speech_mode, SpeechMode.SPEAKING)

    def test_answer_not_spoken_while_listening(self):
        session = self.make_session(ScriptedBackend("Answer"))
        session.start_listening()

        session.submit_user_text("typed while the mic is open")

        self.assertEqual(self.playback.spoken, [])
        self.assertEqual(session.speech_mode, SpeechMode.LISTENING)

    def test_no_voice_result_after_close(self):
        results = []
        session = None

        class ClosingGateway(FailoverChatProvider):
            """Closes the session while the answer is in flight"""

            def answer(self, user_text, history):
                session.close()
                return Answered("late answer")

        session = self.make_session(gateway=ClosingGateway(ScriptedBackend(), ("key",)),
                                    on_voice_result=results.append)

        session._submit_transcript("explain heaps")

        self.assertEqual(results, [])
        self.assertTrue(session.closed)

    def test_stop_speaking_and_close(self):
        session = self.make_session(ScriptedBackend("Long answer"))
        session.submit_user_text("explain heaps")
        self.assertEqual(session.speech_mode, SpeechMode.SPEAKING)

        self.assertTrue(session.stop_speaking())
        self.assertEqual(session.speech_mode, SpeechMode.IDLE)

        session.start_listening()
        session.close()
        self.assertEqual(session.speech_mode, SpeechMode.IDLE)
        self.assertEqual(self.capture.stopped, 1)
        self.assertTrue(session.closed)


if __name__ == "__main__":
    unittest.main()
