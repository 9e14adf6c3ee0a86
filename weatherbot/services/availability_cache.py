from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from weatherbot.core.cache import Clock, utc_now


@dataclass(frozen=True, slots=True)
class AvailabilityCacheEntry:
    available: bool
    expires_at: datetime


class AvailabilityCache:
    """Time-boxed memo of whether the LLM backend answered its last health probe.

    One probe result, success or failure, holds for the whole TTL window.
    Writes replace the entry wholesale; concurrent writers race and the last
    one wins.
    """

    def __init__(self, ttl_seconds: float = 300, clock: Clock = utc_now) -> None:
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._entry: AvailabilityCacheEntry | None = None

    def get(self) -> bool | None:
        entry = self._entry
        if entry is None or self._clock() >= entry.expires_at:
            return None
        return entry.available

    def set(self, available: bool) -> AvailabilityCacheEntry:
        entry = AvailabilityCacheEntry(available=available, expires_at=self._clock() + self.ttl)
        self._entry = entry
        return entry

    def reset(self) -> None:
        self._entry = None

    @property
    def entry(self) -> AvailabilityCacheEntry | None:
        return self._entry
