#!/usr/bin/env python3
"""
Credential Pool for the Gemini backend

This module holds the ordered list of API keys and the rotating cursor used by
the request orchestrator. Blank or whitespace-only keys are dropped at
construction; duplicates are kept. The cursor wraps modulo the pool size and
persists for the lifetime of the pool.

This module is part of the Core Layer and should have no dependencies on
Presentation or Integration layers.

Sample input:
- CredentialPool(["key-a", "  ", "key-b"])

Expected output:
- len(pool) == 2, pool.current() == "key-a", pool.advance() -> 1
"""

from typing import Iterable, List, Mapping, Optional

from loguru import logger

from interview_coder.core.config import get_api_keys
from interview_coder.core.errors import NoCredentialsConfigured


class CredentialPool:
    """Ordered API keys plus a persistent rotation cursor"""

    def __init__(self, keys: Iterable[Optional[str]]):
        self._keys: List[str] = [key.strip() for key in keys if key and key.strip()]
        self._cursor = 0
        logger.debug(f"Credential pool initialized with {len(self._keys)} key(s)")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CredentialPool":
        """Build a pool from GEMINI_API_KEY, GEMINI_API_KEY1.. environment variables."""
        return cls(get_api_keys(environ))

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def is_configured(self) -> bool:
        return bool(self._keys)

    def current(self) -> str:
        """
        Key at the cursor.

        Raises:
            NoCredentialsConfigured: If the pool is empty
        """
        if not self._keys:
            raise NoCredentialsConfigured()
        return self._keys[self._cursor]

    def advance(self) -> int:
        """
        Move the cursor to the next key, wrapping around.

        Returns:
            int: New cursor position
        """
        if self._keys:
            self._cursor = (self._cursor + 1) % len(self._keys)
        return self._cursor

    def label(self, index: Optional[int] = None) -> str:
        """Log-safe name for a key position, e.g. "Key 2/3"."""
        position = self._cursor if index is None else index
        return f"Key {position + 1}/{len(self._keys)}"
