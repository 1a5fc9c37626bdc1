"""Namespace token generation, injectable for deterministic tests."""

from __future__ import annotations

import random
import string
from typing import Protocol

TOKEN_LENGTH = 10
TOKEN_ALPHABET = string.ascii_letters + string.digits


class TokenGenerator(Protocol):
    """Protocol for producing namespace tokens.  Inject a fake in tests."""

    def generate(self) -> str: ...


class RandomTokenGenerator:
    """Default generator: ``length`` characters drawn uniformly from ``alphabet``.

    Two calls are never coordinated, so the collision probability for a
    pair of tokens is ``1 / len(alphabet) ** length``.
    """

    def __init__(
        self,
        *,
        length: int = TOKEN_LENGTH,
        alphabet: str = TOKEN_ALPHABET,
        rng: random.Random | None = None,
    ) -> None:
        if length < 1:
            raise ValueError("length must be positive")
        if not alphabet:
            raise ValueError("alphabet must not be empty")
        self.length = length
        self.alphabet = alphabet
        self._rng = rng or random.SystemRandom()

    def generate(self) -> str:
        return "".join(self._rng.choice(self.alphabet) for _ in range(self.length))
