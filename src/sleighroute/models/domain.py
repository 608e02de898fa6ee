"""Domain models for delivery stops."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

PayloadT = TypeVar("PayloadT")

StopId = Union[int, str]


@dataclass(frozen=True, slots=True)
class Stop(Generic[PayloadT]):
    """A location to visit, usually the delivery address of a wish.

    ``payload`` carries whatever the caller attached to the stop (the wish
    record, marker colour, ...). The routing code passes it through untouched.
    """

    address: str
    stop_id: Optional[StopId] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    payload: Optional[PayloadT] = field(default=None, compare=False)

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if not self.has_coordinates:
            return None
        return (self.latitude, self.longitude)  # type: ignore[return-value]


def stop_label(stop: Stop[Any]) -> str:
    """Human-readable reference used in log messages."""

    if stop.stop_id is not None:
        return f"{stop.stop_id} ({stop.address})"
    return stop.address
