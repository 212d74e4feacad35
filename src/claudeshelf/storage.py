"""JSON file storage for the scan location list."""

from __future__ import annotations

import json
import logging

from claudeshelf.models.scan_location import ScanLocation, default_locations, merge_locations
from claudeshelf.utils import config_dir

log = logging.getLogger(__name__)

_DATA_DIR = config_dir()

LOCATIONS_FILE = _DATA_DIR / "locations.json"


def _ensure_data_dir() -> None:
    """Create the config directory if it doesn't exist."""
    _DATA_DIR.mkdir(parents=True, exist_ok=True)


def load_locations(defaults: list[ScanLocation] | None = None) -> list[ScanLocation]:
    """Load saved locations merged with the current defaults.

    A missing or unreadable file yields the defaults alone.
    """
    defaults = default_locations() if defaults is None else defaults
    if not LOCATIONS_FILE.exists():
        log.debug("No saved scan locations, using defaults")
        return merge_locations([], defaults)
    try:
        with open(LOCATIONS_FILE, encoding="utf-8") as f:
            raw = json.load(f)
        saved = [ScanLocation.from_dict(item) for item in raw.get("locations", [])]
    except (json.JSONDecodeError, OSError, KeyError, TypeError, AttributeError):
        log.exception("Failed to load scan locations: %s", LOCATIONS_FILE)
        return merge_locations([], defaults)

    merged = merge_locations(saved, defaults)
    log.debug(
        "Loaded %d scan locations (%d defaults + %d custom)",
        len(merged), len(defaults), len(merged) - len(defaults),
    )
    return merged


def save_locations(locations: list[ScanLocation]) -> None:
    """Write the location list to disk."""
    _ensure_data_dir()
    try:
        with open(LOCATIONS_FILE, "w", encoding="utf-8") as f:
            json.dump({"locations": [loc.to_dict() for loc in locations]}, f, indent=2)
    except OSError:
        log.exception("Failed to save scan locations: %s", LOCATIONS_FILE)
