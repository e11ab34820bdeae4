"""
Claim Bitmap
Word-packed claim bits with striped locking.

Each index maps to bit (index % 256) of word (index // 256). Words are
guarded by a fixed pool of locks (word % stripes): claims whose words
fall on different stripes never contend, and there is no global lock.

Only ClaimLedger mutates a bitmap, and only while holding the index's
stripe lock (see ClaimBitmap.locked).
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from core.schemas.errors import ClaimTimeoutException


WORD_BITS = 256


class ClaimBitmap:
    """Monotonic bit-set of claimed indices."""

    def __init__(self, stripes: int = 64, lock_timeout_s: float = 5.0) -> None:
        if stripes < 1:
            raise ValueError(f"stripes must be >= 1, got {stripes}")
        self._words: dict[int, int] = {}
        self._locks = [threading.Lock() for _ in range(stripes)]
        self._timeout = lock_timeout_s

    @staticmethod
    def position(index: int) -> tuple[int, int]:
        """(word_index, bit_index) for a claim index."""
        return index // WORD_BITS, index % WORD_BITS

    def _lock_for(self, index: int) -> threading.Lock:
        word_index, _ = self.position(index)
        return self._locks[word_index % len(self._locks)]

    @contextmanager
    def locked(self, index: int) -> Iterator[None]:
        """
        Hold the stripe lock covering `index`.

        Raises:
            ClaimTimeoutException: If the lock is not acquired within the
                configured timeout
        """
        lock = self._lock_for(index)
        if not lock.acquire(timeout=self._timeout):
            raise ClaimTimeoutException(
                f"Timed out after {self._timeout}s waiting for claim lock",
                leaf_index=index,
            )
        try:
            yield
        finally:
            lock.release()

    def is_set(self, index: int) -> bool:
        word_index, bit_index = self.position(index)
        word = self._words.get(word_index, 0)
        return bool((word >> bit_index) & 1)

    def mark(self, index: int) -> None:
        """Set the bit for `index`. Caller must hold `locked(index)`."""
        word_index, bit_index = self.position(index)
        self._words[word_index] = self._words.get(word_index, 0) | (1 << bit_index)

    def indices(self) -> list[int]:
        """All set indices, ascending."""
        result: list[int] = []
        for word_index in sorted(self._words):
            word = self._words[word_index]
            base = word_index * WORD_BITS
            bit = 0
            while word:
                if word & 1:
                    result.append(base + bit)
                word >>= 1
                bit += 1
        return result

    def count(self) -> int:
        return sum(bin(word).count("1") for word in list(self._words.values()))
