from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional

from .models import Identity, Position, RegistryEntry, UserPosition

logger = logging.getLogger(__name__)

POSITION_TTL_SECONDS = 10.0


class PositionRegistry:
    """
    Shared map of reader identity -> last reported position.

    Every reader heartbeats by re-sending its position. An entry is visible
    while `now - last_seen <= ttl`; at exactly `ttl` seconds it is still
    there, one tick later it is swept. Expiry runs lazily on every snapshot
    and may also be driven by a periodic sweeper.

    All access goes through one lock, held only for the map operation
    itself. Timestamps come from `clock` unless a caller passes `now`.
    """

    def __init__(self, ttl: float = POSITION_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Identity, RegistryEntry] = {}

    def upsert(self, identity: Identity, position: Position, now: Optional[float] = None) -> None:
        if now is None:
            now = self._clock()
        entry = RegistryEntry(
            user=UserPosition(name=identity.name, color=identity.color, position=position),
            last_seen=now,
        )
        with self._lock:
            self._entries[identity] = entry

    def snapshot(self, now: Optional[float] = None) -> Dict[Identity, UserPosition]:
        if now is None:
            now = self._clock()
        with self._lock:
            self._expire_locked(now)
            return {identity: entry.user for identity, entry in self._entries.items()}

    def sweep(self, now: Optional[float] = None) -> List[Identity]:
        if now is None:
            now = self._clock()
        with self._lock:
            return self._expire_locked(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _expire_locked(self, now: float) -> List[Identity]:
        expired = [identity for identity, entry in self._entries.items() if now - entry.last_seen > self.ttl]
        for identity in expired:
            del self._entries[identity]
            logger.warning("Removing inactive user: %s", identity.wire_key())
        return expired
