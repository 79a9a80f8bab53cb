"""
Strategies for generated shortcodes.

Provided strategies:
- RandomBase36Strategy: random [0-9a-z] code of length L (default 6)

Common helpers:
- _safe_len: Resolve/normalize desired code length from argument/config (clamped to [3, 24])

Generated codes are not guaranteed unique; the allocator retries against
the store's existing codes up to its attempt cap.
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Type

from clipurl.config import settings

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _safe_len(length: Optional[int]) -> int:
    """Resolve desired code length from arg or config, clamped to the custom-code bounds [3, 24]."""
    L = int(length) if length is not None else int(getattr(settings, "CODE_LENGTH", 6))
    return max(3, min(24, L))


class BaseStrategy(ABC):
    """Abstract base for code generation strategies."""

    @abstractmethod
    def generate(self, *, length: Optional[int] = None) -> str:
        raise NotImplementedError

    def __call__(self) -> str:
        return self.generate()


@dataclass
class RandomBase36Strategy(BaseStrategy):
    """Uniform random base-36 codes drawn from the OS entropy source."""
    length: Optional[int] = None
    rng: random.Random = field(default_factory=random.SystemRandom, repr=False)

    def generate(self, *, length: Optional[int] = None) -> str:
        L = _safe_len(length if length is not None else self.length)
        return "".join(self.rng.choice(BASE36_ALPHABET) for _ in range(L))


STRATEGY_REGISTRY: Dict[str, Type[BaseStrategy]] = {
    "random": RandomBase36Strategy,
    "base36": RandomBase36Strategy,
}


def get_strategy(name: Optional[str] = None) -> BaseStrategy:
    """Build the strategy registered under `name` ("random" by default)."""
    key = (name or "random").strip().lower()
    cls = STRATEGY_REGISTRY.get(key)
    if cls is None:
        raise ValueError(f"Unknown code strategy: {key!r}")
    return cls()
