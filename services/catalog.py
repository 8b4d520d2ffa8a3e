"""Static catalog of promotion locations."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional

from core import get_logger
from core.constants import DEFAULT_LOCATIONS
from core.exceptions import ConfigurationError, UnknownLocationError
from database.models import Location

logger = get_logger(__name__)

_REQUIRED_FIELDS = ("name", "prize", "emoji")


class LocationCatalog:
    """Immutable mapping from location id to display metadata."""

    def __init__(self, locations: Mapping[str, Location]) -> None:
        self._locations: Dict[str, Location] = dict(locations)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "LocationCatalog":
        """Build a catalog from ``{id: {name, prize, emoji}}``.

        Raises:
            ConfigurationError: If an entry is missing a field or is not a string
        """
        if not isinstance(raw, Mapping) or not raw:
            raise ConfigurationError("Location catalog must be a non-empty mapping")

        locations: Dict[str, Location] = {}
        for location_id, entry in raw.items():
            if not isinstance(location_id, str) or not location_id.strip():
                raise ConfigurationError(f"Invalid location id: {location_id!r}")
            if not isinstance(entry, Mapping):
                raise ConfigurationError(f"Location {location_id!r} must be an object")
            for field in _REQUIRED_FIELDS:
                if not isinstance(entry.get(field), str):
                    raise ConfigurationError(
                        f"Location {location_id!r} is missing string field {field!r}"
                    )
            locations[location_id] = Location(
                id=location_id,
                name=entry["name"],
                prize=entry["prize"],
                emoji=entry["emoji"],
            )
        return cls(locations)

    def get(self, location_id: object) -> Location:
        if not isinstance(location_id, str) or location_id not in self._locations:
            raise UnknownLocationError(location_id)
        return self._locations[location_id]

    def find(self, location_id: str) -> Optional[Location]:
        return self._locations.get(location_id)

    def ids(self) -> list[str]:
        return list(self._locations)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {location_id: location.info() for location_id, location in self._locations.items()}

    def location_urls(self, base_url: str) -> Dict[str, str]:
        """Public page URL per location, printed as QR code targets at startup."""
        base = base_url.rstrip("/")
        return {location_id: f"{base}/location/{location_id}" for location_id in self._locations}

    def __contains__(self, location_id: object) -> bool:
        return location_id in self._locations

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations.values())

    def __len__(self) -> int:
        return len(self._locations)


def load_catalog(locations_file: Optional[str] = None) -> LocationCatalog:
    """Load the catalog from a JSON file, or the built-in locations when no file is given."""
    if not locations_file:
        return LocationCatalog.from_mapping(DEFAULT_LOCATIONS)

    path = Path(locations_file)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read locations file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Locations file {path} is not valid JSON: {exc}") from exc

    catalog = LocationCatalog.from_mapping(raw)
    logger.info(f"Loaded {len(catalog)} locations from {path}")
    return catalog
