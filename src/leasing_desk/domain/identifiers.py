"""Identifier strategies for properties and visits.

Property ids look like ``P-12345`` and visit ids like ``V-12345``.
"""

import random
from collections.abc import Callable
from typing import Protocol

PROPERTY_PREFIX = "P"
VISIT_PREFIX = "V"

_MIN_SUFFIX = 10000
_MAX_SUFFIX = 99999


class IdGenerator(Protocol):
    def new_id(self, prefix: str, exists: Callable[[str], bool]) -> str: ...


class RandomIdGenerator:
    """Five random digits after the prefix, retried until unused."""

    MAX_ATTEMPTS = 50

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def new_id(self, prefix: str, exists: Callable[[str], bool]) -> str:
        for _ in range(self.MAX_ATTEMPTS):
            candidate = f"{prefix}-{self._rng.randint(_MIN_SUFFIX, _MAX_SUFFIX)}"
            if not exists(candidate):
                return candidate
        raise RuntimeError(f"Could not find a free {prefix} id")


class SequentialIdGenerator:
    """Monotonic counter per prefix, skipping ids already in use."""

    def __init__(self, start: int = _MIN_SUFFIX) -> None:
        self._next: dict[str, int] = {}
        self._start = start

    def new_id(self, prefix: str, exists: Callable[[str], bool]) -> str:
        number = self._next.get(prefix, self._start)
        candidate = f"{prefix}-{number}"
        while exists(candidate):
            number += 1
            candidate = f"{prefix}-{number}"
        self._next[prefix] = number + 1
        return candidate


__all__ = [
    "IdGenerator",
    "PROPERTY_PREFIX",
    "RandomIdGenerator",
    "SequentialIdGenerator",
    "VISIT_PREFIX",
]
