"""Known canal locations and the display/storage name mapping."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True, slots=True)
class Location:
    """A monitored location on the canal."""

    display_name: str
    storage_name: str
    key: str
    color: str


KNOWN_LOCATIONS: Tuple[Location, ...] = (
    Location(display_name="Dow's Lake", storage_name="DowsLake", key="dows", color="rgb(75, 192, 192)"),
    Location(display_name="Fifth Avenue", storage_name="FifthAvenue", key="fifth", color="rgb(255, 99, 132)"),
    Location(display_name="NAC", storage_name="NAC", key="nac", color="rgb(54, 162, 235)"),
)

_DISPLAY_TO_STORAGE: Dict[str, str] = {
    location.display_name: location.storage_name for location in KNOWN_LOCATIONS
}
_STORAGE_TO_DISPLAY: Dict[str, str] = {
    location.storage_name: location.display_name for location in KNOWN_LOCATIONS
}


def to_storage_name(display_name: str) -> str:
    """Map a human-facing name to its storage identifier; unknown names pass through."""
    return _DISPLAY_TO_STORAGE.get(display_name, display_name)


def to_display_name(storage_name: str) -> str:
    """Map a storage identifier back to its human-facing name; unknown names pass through."""
    return _STORAGE_TO_DISPLAY.get(storage_name, storage_name)


def display_names() -> list[str]:
    return [location.display_name for location in KNOWN_LOCATIONS]
