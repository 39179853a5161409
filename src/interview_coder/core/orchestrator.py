#!/usr/bin/env python3
"""
Request Orchestrator for the Gemini backend

This module sends a single prompt to the text-generation backend, failing
over across the credential pool. Each call makes at most len(pool) attempts,
starting at the pool's current cursor:

- success: the cursor advances once past the key that worked (round-robin
  load spreading) and the candidate text is returned
- any failure (transport error, non-2xx status, malformed body): the cursor
  advances and the next key is tried immediately

When every key has failed, AllCredentialsExhausted carries the last error and
the number of attempts. There is no backoff, cooldown or key disabling.
Failures are classified as "quota" or "other" for logging only.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- await orchestrator.send("Solve two-sum in python", operation="generate")

Expected output:
- "```python\\ndef two_sum(nums, target): ...```"
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from interview_coder.core.constants import (
    GENERATION_CONFIG,
    QUOTA_MARKERS,
    QUOTA_STATUS_CODES,
    REQUEST_TIMEOUT_SECONDS,
)
from interview_coder.core.credentials import CredentialPool
from interview_coder.core.errors import (
    AllCredentialsExhausted,
    BackendRequestError,
    MalformedBackendResponse,
    NoCredentialsConfigured,
)
from interview_coder.core.session import CancellationToken
from interview_coder.core.utils import truncate_large_value


def build_request_body(prompt: str, generation_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build a generateContent request body.

    Args:
        prompt: Prompt text
        generation_config: Overrides for GENERATION_CONFIG

    Returns:
        Dict[str, Any]: JSON-serializable request body
    """
    return {
        "contents": [{"parts": [{"text": prompt}]}],
        "generationConfig": dict(generation_config or GENERATION_CONFIG),
    }


def extract_candidate_text(payload: Any) -> str:
    """
    Pull candidates[0].content.parts[0].text out of a backend reply.

    Args:
        payload: Decoded JSON body

    Returns:
        str: Generated text

    Raises:
        MalformedBackendResponse: If the path is missing or not a string
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedBackendResponse(
            "Invalid response from Gemini API",
            technical=f"Missing candidates[0].content.parts[0].text: {str(e)}"
        ) from e

    if not isinstance(text, str):
        raise MalformedBackendResponse(
            "Invalid response from Gemini API",
            technical=f"Candidate text is {type(text).__name__}, not str"
        )
    return text


def classify_failure(error: BaseException) -> str:
    """
    Classify a failed attempt for logging.

    Args:
        error: Exception raised by the attempt

    Returns:
        str: "quota" for rate-limit/quota failures, otherwise "other"
    """
    if isinstance(error, httpx.HTTPStatusError) and error.response.status_code in QUOTA_STATUS_CODES:
        return "quota"
    message = str(error).lower()
    if any(marker in message for marker in QUOTA_MARKERS):
        return "quota"
    return "other"


def sanitize_http_error(error: httpx.HTTPError, key: str) -> BackendRequestError:
    """
    Convert an httpx error into a BackendRequestError whose message cannot
    contain the API key (httpx messages embed the request URL).

    Args:
        error: Error raised by the HTTP client
        key: Key used for the failed attempt

    Returns:
        BackendRequestError: Log-safe error, chained to the original
    """
    status_code = None
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        message = f"HTTP {status_code} {error.response.reason_phrase}"
        detail = error.response.text
        if detail:
            message = f"{message}: {truncate_large_value(detail)}"
    elif isinstance(error, httpx.TimeoutException):
        message = f"Request timed out: {type(error).__name__}"
    else:
        message = f"{type(error).__name__}: {str(error)}"

    if key:
        message = message.replace(key, "***")

    sanitized = BackendRequestError(message, status_code=status_code, kind=classify_failure(error))
    sanitized.__cause__ = error
    return sanitized


class RequestOrchestrator:
    """Sends prompts to the backend with multi-key failover"""

    def __init__(
        self,
        pool: CredentialPool,
        api_url: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        generation_config: Optional[Dict[str, Any]] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.pool = pool
        self.api_url = api_url
        self.timeout = timeout
        self.generation_config = dict(generation_config or GENERATION_CONFIG)
        self._client = client

    async def _post(self, client: httpx.AsyncClient, key: str, body: Dict[str, Any]) -> str:
        response = await client.post(
            self.api_url,
            params={"key": key},
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as e:
            raise MalformedBackendResponse(
                "Invalid response from Gemini API",
                technical=f"Body is not JSON: {truncate_large_value(response.text)}"
            ) from e
        return extract_candidate_text(payload)

    async def send(
        self,
        prompt: str,
        operation: str = "process",
        cancel_token: Optional[CancellationToken] = None
    ) -> str:
        """
        Send a prompt, rotating through keys until one succeeds.

        Args:
            prompt: Prompt text
            operation: Name used in log messages
            cancel_token: Checked before every attempt

        Returns:
            str: Candidate text of the first successful reply

        Raises:
            NoCredentialsConfigured: If the pool is empty
            AllCredentialsExhausted: If every key failed
            OperationCancelled: If the token was cancelled between attempts
        """
        if not self.pool.is_configured:
            logger.error("No Gemini API keys available")
            raise NoCredentialsConfigured()

        body = build_request_body(prompt, self.generation_config)
        logger.debug(f"Prompt for {operation}: {truncate_large_value(prompt)}")

        if self._client is not None:
            return await self._send_with(self._client, body, operation, cancel_token)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._send_with(client, body, operation, cancel_token)

    async def _send_with(
        self,
        client: httpx.AsyncClient,
        body: Dict[str, Any],
        operation: str,
        cancel_token: Optional[CancellationToken]
    ) -> str:
        attempts = len(self.pool)
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            key_label = self.pool.label()
            logger.info(f"[{operation}] Attempt {attempt}/{attempts} with {key_label}")

            key = self.pool.current()
            try:
                text = await self._post(client, key, body)
            except MalformedBackendResponse as e:
                last_error = e
                logger.warning(f"[{operation}] {key_label} returned a malformed response: {e.technical}")
                self.pool.advance()
                continue
            except httpx.HTTPError as e:
                last_error = sanitize_http_error(e, key)
                if last_error.kind == "quota":
                    logger.warning(f"[{operation}] {key_label} hit quota/rate limit: {last_error.message}")
                else:
                    logger.warning(f"[{operation}] {key_label} failed: {last_error.message}")
                self.pool.advance()
                continue

            self.pool.advance()
            logger.info(f"[{operation}] Success with {key_label}")
            return text

        logger.error(f"[{operation}] All {attempts} Gemini API key(s) failed")
        raise AllCredentialsExhausted(last_error=last_error, attempts=attempts)


if __name__ == "__main__":
    """Validate key rotation against a mock transport"""
    import sys
    import asyncio

    all_validation_failures = []
    total_tests = 0

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["key"] == "good":
            return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
        return httpx.Response(429, json={"error": {"message": "quota exceeded"}})

    async def run_checks() -> None:
        global total_tests
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            # Test 1: Failed keys rotate to the working one
            total_tests += 1
            pool = CredentialPool(["bad-1", "bad-2", "good"])
            orchestrator = RequestOrchestrator(pool, "https://example.invalid/generate", client=client)
            text = await orchestrator.send("prompt", operation="validate")
            if text != "ok" or pool.cursor != 0:
                all_validation_failures.append(f"send test: Expected 'ok' and cursor 0, got {text!r}, {pool.cursor}")

            # Test 2: Every key failing exhausts the pool
            total_tests += 1
            orchestrator = RequestOrchestrator(
                CredentialPool(["bad-1", "bad-2"]), "https://example.invalid/generate", client=client
            )
            try:
                await orchestrator.send("prompt", operation="validate")
                all_validation_failures.append("send test: Exhausted pool did not raise")
            except AllCredentialsExhausted:
                pass

    asyncio.run(run_checks())

    if all_validation_failures:
        print(f"❌ VALIDATION FAILED - {len(all_validation_failures)} of {total_tests} tests failed:")
        for failure in all_validation_failures:
            print(f"  - {failure}")
        sys.exit(1)
    else:
        print(f"✅ VALIDATION PASSED - All {total_tests} tests produced expected results")
        print("Request orchestrator is validated and ready for use")
        sys.exit(0)
