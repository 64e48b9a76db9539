"""Die generators: where the game gets its die throws from.

The game only ever asks for one face at a time, so a test can swap in a
deterministic generator (see turn_script.ScriptedGenerator) whenever it likes.
"""
from __future__ import annotations

import random
from abc import ABC, abstractmethod


class Generator(ABC):
    """Produces single die throws."""

    @abstractmethod
    def next_die_throw(self) -> int:
        """Return a face value between 1 and 6."""
        ...


class RandomGenerator(Generator):
    """Uniform die throws from a private random.Random instance."""

    def __init__(self, seed: int | None = None) -> None:
        self.random = random.Random(seed)

    def next_die_throw(self) -> int:
        return self.random.randint(1, 6)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
