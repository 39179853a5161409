#!/usr/bin/env python3
"""
Unit tests for core/orchestrator.py
"""

import os
import sys
import json
import unittest

import httpx

# Add parent directory to path to import module
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from interview_coder.core.credentials import CredentialPool
from interview_coder.core.errors import (
    AllCredentialsExhausted,
    MalformedBackendResponse,
    NoCredentialsConfigured,
    OperationCancelled,
)
from interview_coder.core.orchestrator import (
    RequestOrchestrator,
    build_request_body,
    classify_failure,
    extract_candidate_text,
    sanitize_http_error,
)
from interview_coder.core.session import CancellationToken

API_URL = "https://backend.test/v1/models/test:generateContent"


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class RecordingBackend:
    """MockTransport handler answering per key"""

    def __init__(self, replies):
        self.replies = replies
        self.keys = []
        self.bodies = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        key = request.url.params["key"]
        self.keys.append(key)
        self.bodies.append(json.loads(request.content))
        reply = self.replies[key]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply()
        return reply


class TestPayloadHelpers(unittest.TestCase):
    """Test cases for request and reply helpers"""

    def test_build_request_body(self):
        body = build_request_body("Solve it")
        self.assertEqual(body["contents"][0]["parts"][0]["text"], "Solve it")
        self.assertEqual(body["generationConfig"]["maxOutputTokens"], 4000)
        self.assertEqual(body["generationConfig"]["candidateCount"], 1)

    def test_extract_candidate_text(self):
        self.assertEqual(extract_candidate_text(candidate("hello")), "hello")

    def test_extract_candidate_text_malformed(self):
        for payload in ({}, {"candidates": []}, {"candidates": [{"content": {}}]}, None, candidate(42)):
            with self.assertRaises(MalformedBackendResponse):
                extract_candidate_text(payload)

    def test_classify_failure(self):
        request = httpx.Request("POST", API_URL)
        quota = httpx.HTTPStatusError(
            "limited", request=request, response=httpx.Response(429, request=request)
        )
        server = httpx.HTTPStatusError(
            "broken", request=request, response=httpx.Response(500, request=request)
        )
        self.assertEqual(classify_failure(quota), "quota")
        self.assertEqual(classify_failure(server), "other")
        self.assertEqual(classify_failure(RuntimeError("Quota exceeded for project")), "quota")
        self.assertEqual(classify_failure(RuntimeError("Rate limit reached")), "quota")
        self.assertEqual(classify_failure(RuntimeError("connection reset")), "other")

    def test_sanitize_http_error_redacts_key(self):
        error = httpx.ConnectError(f"failed for {API_URL}?key=secret-key")
        sanitized = sanitize_http_error(error, "secret-key")
        self.assertNotIn("secret-key", sanitized.message)
        self.assertIn("***", sanitized.message)
        self.assertIs(sanitized.__cause__, error)

    def test_sanitize_http_error_status(self):
        request = httpx.Request("POST", f"{API_URL}?key=secret-key")
        response = httpx.Response(403, request=request, text="API key secret-key is over quota")
        error = httpx.HTTPStatusError("forbidden", request=request, response=response)

        sanitized = sanitize_http_error(error, "secret-key")

        self.assertEqual(sanitized.status_code, 403)
        self.assertEqual(sanitized.kind, "quota")
        self.assertTrue(sanitized.message.startswith("HTTP 403"))
        self.assertNotIn("secret-key", sanitized.message)


class TestRequestOrchestrator(unittest.IsolatedAsyncioTestCase):
    """Test cases for multi-key failover"""

    def make(self, keys, replies):
        backend = RecordingBackend(replies)
        client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
        self.addAsyncCleanup(client.aclose)
        pool = CredentialPool(keys)
        return RequestOrchestrator(pool, API_URL, timeout=5, client=client), pool, backend

    async def test_first_key_success(self):
        orchestrator, pool, backend = self.make(["k0", "k1"], {"k0": httpx.Response(200, json=candidate("answer"))})

        text = await orchestrator.send("prompt")

        self.assertEqual(text, "answer")
        self.assertEqual(backend.keys, ["k0"])
        self.assertEqual(backend.bodies[0]["contents"][0]["parts"][0]["text"], "prompt")
        self.assertEqual(pool.cursor, 1)

    async def test_rotates_past_failures(self):
        """Keys 0 and 1 fail, key 2 succeeds; the cursor then wraps to 0"""
        orchestrator, pool, backend = self.make(
            ["k0", "k1", "k2"],
            {
                "k0": httpx.Response(429, json={"error": {"message": "Quota exceeded"}}),
                "k1": httpx.Response(500, text="internal"),
                "k2": httpx.Response(200, json=candidate("third time lucky")),
            }
        )

        text = await orchestrator.send("prompt")

        self.assertEqual(text, "third time lucky")
        self.assertEqual(backend.keys, ["k0", "k1", "k2"])
        self.assertEqual(pool.cursor, 0)

    async def test_cursor_persists_between_requests(self):
        """A new request starts at the key after the last one used"""
        def ok():
            return httpx.Response(200, json=candidate("ok"))

        orchestrator, pool, backend = self.make(["k0", "k1"], {"k0": ok, "k1": ok})

        await orchestrator.send("first")
        await orchestrator.send("second")

        self.assertEqual(backend.keys, ["k0", "k1"])

    async def test_all_keys_exhausted(self):
        """Each key is tried exactly once before giving up"""
        orchestrator, pool, backend = self.make(
            ["k0", "k1", "k2"],
            {
                "k0": httpx.Response(500, text="down"),
                "k1": httpx.ConnectError("connection refused"),
                "k2": httpx.Response(503, text="k2 is unavailable"),
            }
        )

        with self.assertRaises(AllCredentialsExhausted) as ctx:
            await orchestrator.send("prompt")

        self.assertEqual(backend.keys, ["k0", "k1", "k2"])
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertIn("503", ctx.exception.message)
        self.assertNotIn("k2 is", ctx.exception.message)
        self.assertEqual(pool.cursor, 0)

    async def test_malformed_reply_rotates(self):
        """A reply without candidate text counts as a failed attempt"""
        orchestrator, pool, backend = self.make(
            ["k0", "k1"],
            {
                "k0": httpx.Response(200, json={"candidates": []}),
                "k1": httpx.Response(200, json=candidate("fine")),
            }
        )

        self.assertEqual(await orchestrator.send("prompt"), "fine")
        self.assertEqual(backend.keys, ["k0", "k1"])

    async def test_non_json_reply_rotates(self):
        orchestrator, pool, backend = self.make(
            ["k0", "k1"],
            {
                "k0": httpx.Response(200, text="<html>oops</html>"),
                "k1": httpx.Response(200, json=candidate("fine")),
            }
        )

        self.assertEqual(await orchestrator.send("prompt"), "fine")

    async def test_no_keys(self):
        """An empty pool fails before any request is sent"""
        orchestrator, pool, backend = self.make([], {})

        with self.assertRaises(NoCredentialsConfigured):
            await orchestrator.send("prompt")
        self.assertEqual(backend.keys, [])

    async def test_cancelled_token_stops_attempts(self):
        orchestrator, pool, backend = self.make(["k0"], {"k0": httpx.Response(200, json=candidate("x"))})
        token = CancellationToken()
        token.cancel()

        with self.assertRaises(OperationCancelled):
            await orchestrator.send("prompt", cancel_token=token)
        self.assertEqual(backend.keys, [])


if __name__ == "__main__":
    unittest.main()
