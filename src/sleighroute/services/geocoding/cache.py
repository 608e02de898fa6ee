"""Caller-owned memo of geocoding results."""

from __future__ import annotations

import threading
from typing import Optional

Coordinates = tuple[float, float]


class GeocodeCache:
    """Thread-safe mapping of formatted address to ``(lat, lon)``.

    Only successful lookups are stored. Whoever creates the cache decides its
    lifetime; nothing in the package keeps one globally.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Coordinates] = {}
        self._lock = threading.Lock()

    def get(self, address: str) -> Optional[Coordinates]:
        with self._lock:
            return self._entries.get(address)

    def set(self, address: str, coordinates: Coordinates) -> None:
        with self._lock:
            self._entries[address] = coordinates

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
