"""Identifier generation for sales and debts.

Two policies:

- strong: a random UUID (version 4) drawn from the operating system's
  secure random source.
- weak: "<epoch-millis>-<hex suffix>" from the clock and a pseudo-random
  generator. Used when no secure source is available, or when forced.

The weak policy gives no uniqueness guarantee under high-frequency or
adversarial use. It is acceptable here only because ids are scoped to one
till session driven by human-paced input.
"""

from __future__ import annotations

import random
import time
import uuid
from typing import Callable, Optional

import structlog

logger = structlog.get_logger()

Clock = Callable[[], float]


class IdGenerator:
    """Produces ids for sales and debts under an explicit policy."""

    def __init__(
        self,
        prefer_strong: bool = True,
        clock: Clock = time.time,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.prefer_strong = prefer_strong
        self._clock = clock
        self._rng = rng if rng is not None else random.Random()

    @classmethod
    def weak(cls, clock: Clock = time.time, rng: Optional[random.Random] = None) -> IdGenerator:
        """Build a generator that always uses the timestamp-based policy."""
        return cls(prefer_strong=False, clock=clock, rng=rng)

    def new_id(self) -> str:
        if self.prefer_strong:
            try:
                return str(uuid.uuid4())
            except NotImplementedError:
                # os.urandom has no entropy source on this host
                logger.warning("secure_random_unavailable", fallback="weak_id")
                self.prefer_strong = False
        return self.weak_id()

    def weak_id(self) -> str:
        millis = int(self._clock() * 1000)
        suffix = format(self._rng.getrandbits(52), "x")
        return f"{millis}-{suffix}"
