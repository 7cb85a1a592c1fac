"""Identifier sources used to link objects inside a generated Xcode project."""

from __future__ import annotations

import random
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional


class IdentifierSource(ABC):
    """Abstract supplier of hyphenated version-4 UUID strings."""

    @abstractmethod
    def next_identifier(self) -> str:
        """Return a new identifier."""

    def take(self, count: int) -> List[str]:
        return [self.next_identifier() for _ in range(count)]


class RandomIdentifierSource(IdentifierSource):
    """Draws identifiers from the process-wide entropy pool."""

    def next_identifier(self) -> str:
        return str(uuid.uuid4())


class SeededIdentifierSource(IdentifierSource):
    """Reproducible identifiers derived from a seeded generator."""

    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._random = random.Random(seed)

    def next_identifier(self) -> str:
        return str(uuid.UUID(int=self._random.getrandbits(128), version=4))


class SequentialIdentifierSource(IdentifierSource):
    """Counts upward from ``start``; handy for readable fixtures."""

    def __init__(self, start: int = 1) -> None:
        self._counter = start

    def next_identifier(self) -> str:
        value = uuid.UUID(int=self._counter, version=4)
        self._counter += 1
        return str(value)


def build_identifier_source(seed: Optional[int] = None) -> IdentifierSource:
    """Factory returning a seeded source when a seed is given."""

    if seed is None:
        return RandomIdentifierSource()
    return SeededIdentifierSource(seed)
