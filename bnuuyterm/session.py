"""Buffering of program output and time-budgeted feeding into the terminal."""

from __future__ import annotations

import time
from typing import Protocol

PARSE_CHUNK_SIZE = 64 * 1024
PROCESSING_BUDGET = 0.012


class _Feedable(Protocol):
    def feed(self, data: bytes) -> None: ...


class InputBuffer:
    """Holds bytes read from the program until the next frame parses them."""

    def __init__(self) -> None:
        self._data = bytearray()

    def push(self, data: bytes) -> None:
        """Append bytes received from the program."""
        self._data.extend(data)

    def drain_into(
        self,
        term: _Feedable,
        chunk_size: int = PARSE_CHUNK_SIZE,
        budget: float = PROCESSING_BUDGET,
    ) -> bool:
        """Feed buffered bytes to ``term`` in chunks until empty or ``budget`` seconds pass.

        Returns whether bytes are still left over.
        """
        if chunk_size < 1:
            raise ValueError(f"chunk size must be positive, got {chunk_size}")
        start = time.monotonic()
        while self._data and time.monotonic() - start < budget:
            chunk = bytes(self._data[:chunk_size])
            del self._data[:chunk_size]
            term.feed(chunk)
        return bool(self._data)

    def __len__(self) -> int:
        return len(self._data)