#!/usr/bin/env python3
"""
Gemini backend tests - request shape and status classification
"""

import sys
import unittest
from pathlib import Path
from unittest.mock import Mock

import requests

sys.path.insert(0, str(Path(__file__).parent.parent / "host"))

from mentor_assistant.model_providers.base import ProviderError, TransientProviderError  # noqa: E402
from mentor_assistant.model_providers.gemini_chat import GeminiChatProvider  # noqa: E402

CONTENTS = [
    {"role": "system", "content": "Platform Info:\nfeatures: mock interviews"},
    {"role": "assistant", "content": "Hi!"},
    {"role": "user", "content": "Explain recursion"},
]


def make_response(status, body=None, reason="Error"):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class TestGeminiChatProvider(unittest.TestCase):

    def setUp(self):
        self.session = Mock()
        self.provider = GeminiChatProvider(
            model="gemini-1.5-flash-latest",
            base_url="https://example.test/",
            timeout=12,
            session=self.session,
        )

    def test_request_shape(self):
        self.session.post.return_value = make_response(
            200, {"candidates": [{"content": {"parts": [{"text": "Recursion is..."}]}}]}
        )

        text = self.provider.complete(CONTENTS, "secret-key", temperature=0.7)

        self.assertEqual(text, "Recursion is...")
        args, kwargs = self.session.post.call_args
        self.assertEqual(
            args[0], "https://example.test/v1beta/models/gemini-1.5-flash-latest:generateContent"
        )
        self.assertEqual(kwargs["params"], {"key": "secret-key"})
        self.assertEqual(kwargs["timeout"], 12)
        self.assertEqual(kwargs["json"], {
            "contents": [
                {"role": "user", "parts": [{"text": "Platform Info:\nfeatures: mock interviews"}]},
                {"role": "model", "parts": [{"text": "Hi!"}]},
                {"role": "user", "parts": [{"text": "Explain recursion"}]},
            ],
            "generationConfig": {"temperature": 0.7},
        })

    def test_rate_limit_and_overload_are_transient(self):
        for status in (429, 503):
            with self.subTest(status=status):
                self.session.post.return_value = make_response(status, {"error": {"message": "slow down"}})
                with self.assertRaises(TransientProviderError) as ctx:
                    self.provider.complete(CONTENTS, "k")
                self.assertEqual(ctx.exception.status, status)

    def test_transport_failures_are_transient(self):
        for error in (requests.exceptions.ConnectionError("refused"), requests.exceptions.Timeout()):
            with self.subTest(error=type(error).__name__):
                self.session.post.side_effect = error
                with self.assertRaises(TransientProviderError):
                    self.provider.complete(CONTENTS, "k")

    def test_other_errors_carry_backend_message(self):
        self.session.post.return_value = make_response(
            400, {"error": {"code": 400, "message": "API key not valid. Please pass a valid API key."}}
        )

        with self.assertRaises(ProviderError) as ctx:
            self.provider.complete(CONTENTS, "bad")

        self.assertNotIsInstance(ctx.exception, TransientProviderError)
        self.assertEqual(ctx.exception.message, "API key not valid. Please pass a valid API key.")
        self.assertEqual(ctx.exception.status, 400)

    def test_error_without_json_body_uses_reason(self):
        self.session.post.return_value = make_response(403, ValueError("no json"), reason="Forbidden")

        with self.assertRaises(ProviderError) as ctx:
            self.provider.complete(CONTENTS, "k")

        self.assertEqual(ctx.exception.message, "Forbidden")

    def test_success_without_candidates_returns_none(self):
        for body in ({}, {"candidates": []}, {"candidates": [{"content": {"parts": []}}]}):
            with self.subTest(body=body):
                self.session.post.return_value = make_response(200, body)
                self.assertIsNone(self.provider.complete(CONTENTS, "k"))

    def test_success_with_non_json_body_returns_none(self):
        self.session.post.return_value = make_response(200, ValueError("Expecting value"), reason="OK")
        self.assertIsNone(self.provider.complete(CONTENTS, "k"))


if __name__ == "__main__":
    unittest.main()
