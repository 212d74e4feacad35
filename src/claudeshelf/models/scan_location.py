"""Scan location dataclass and list helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path

_DEFAULT_SUBDIRS = (".claude", "projects", "src", "dev", "code", "workspace", "repos")


@dataclass(slots=True)
class ScanLocation:
    """A directory to scan for configuration files.

    Built-in locations can only be disabled; user-added ones can be removed.
    """

    path: str
    enabled: bool = True
    builtin: bool = False

    @property
    def display_name(self) -> str:
        """Tilde-abbreviated path under home, otherwise the last component."""
        home = str(Path.home())
        if self.path == home:
            return "~"
        if self.path.startswith(home + "/"):
            return "~" + self.path[len(home):]
        return Path(self.path).name or self.path

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> ScanLocation:
        return cls(
            path=str(data["path"]),
            enabled=bool(data.get("enabled", True)),
            builtin=bool(data.get("builtin", False)),
        )


def default_locations(home: Path | None = None) -> list[ScanLocation]:
    """Return the built-in locations, all enabled."""
    home = home or Path.home()
    paths = [str(home / sub) for sub in _DEFAULT_SUBDIRS] + [str(home)]
    return [ScanLocation(path=p, enabled=True, builtin=True) for p in paths]


def merge_locations(saved: list[ScanLocation], defaults: list[ScanLocation]) -> list[ScanLocation]:
    """Merge saved locations into the current defaults.

    Every default is present (new ones enabled), the saved enabled flag of a
    default is kept, and saved custom locations follow in their saved order.
    """
    saved_by_path = {loc.path: loc for loc in saved}
    result: list[ScanLocation] = []
    for default in defaults:
        merged = ScanLocation(path=default.path, enabled=default.enabled, builtin=True)
        if default.path in saved_by_path:
            merged.enabled = saved_by_path[default.path].enabled
        result.append(merged)

    default_paths = {d.path for d in defaults}
    seen: set[str] = set()
    for loc in saved:
        if loc.path in default_paths or loc.path in seen:
            continue
        seen.add(loc.path)
        result.append(ScanLocation(path=loc.path, enabled=loc.enabled, builtin=False))
    return result


def add_location(locations: list[ScanLocation], path: str) -> bool:
    """Append a user location. Returns False if the path is already present."""
    if any(loc.path == path for loc in locations):
        return False
    locations.append(ScanLocation(path=path, enabled=True, builtin=False))
    return True


def remove_location(locations: list[ScanLocation], path: str) -> bool:
    """Remove a user location. Built-in locations are never removed."""
    for i, loc in enumerate(locations):
        if loc.path == path:
            if loc.builtin:
                return False
            del locations[i]
            return True
    return False


def set_enabled(locations: list[ScanLocation], path: str, enabled: bool) -> bool:
    """Enable or disable a location by path. Returns False if not found."""
    for loc in locations:
        if loc.path == path:
            loc.enabled = enabled
            return True
    return False
