"""Portfolio and record identifiers.

Ids are version-4 UUID strings. Callers that need reproducible output inject
their own ``IdGenerator``; everything else uses the module default.
"""
from __future__ import annotations

import random
import uuid
from typing import Protocol

import structlog

log = structlog.get_logger()

UUID_TEMPLATE = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


class IdGenerator(Protocol):
    def new_id(self) -> str: ...


class UuidGenerator:
    """uuid4 from the OS CSPRNG, with a pseudo-random template fill as fallback."""

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()
        self._fallback_logged = False

    def new_id(self) -> str:
        try:
            return str(uuid.uuid4())
        except NotImplementedError:
            if not self._fallback_logged:
                log.warning("id_generator_fallback", reason="no_os_randomness")
                self._fallback_logged = True
            return self.fallback_id()

    def fallback_id(self) -> str:
        out = []
        for ch in UUID_TEMPLATE:
            if ch == "x":
                out.append(format(self._rng.randrange(16), "x"))
            elif ch == "y":
                out.append(format((self._rng.randrange(16) & 0x3) | 0x8, "x"))
            else:
                out.append(ch)
        return "".join(out)


class SequentialIdGenerator:
    """Deterministic UUID-shaped ids: 00000000-0000-4000-8000-000000000001, ..."""

    def __init__(self, start: int = 1):
        self._next = start

    def new_id(self) -> str:
        n = self._next
        self._next += 1
        return f"00000000-0000-4000-8000-{n:012x}"


default_generator: IdGenerator = UuidGenerator()


def generate_id(id_generator: IdGenerator | None = None) -> str:
    return (id_generator or default_generator).new_id()
