"""Shared test fixtures."""

from __future__ import annotations

import shutil
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

import claudeshelf.storage as storage
from claudeshelf.models.category import Category, Scope
from claudeshelf.models.scan_result import FileEntry, generate_id
from claudeshelf.settings import Settings


@pytest.fixture
def isolate_storage(tmp_path, monkeypatch):
    """Redirect scan location storage to a temp directory."""
    data_dir = tmp_path / "claudeshelf_config"
    data_dir.mkdir()
    locations_file = data_dir / "locations.json"
    monkeypatch.setattr(storage, "LOCATIONS_FILE", locations_file)
    monkeypatch.setattr(storage, "_DATA_DIR", data_dir)
    return locations_file


@pytest.fixture
def isolate_settings(tmp_path, monkeypatch):
    """Point the settings singleton at a temp file."""
    settings = Settings(tmp_path / "settings" / "settings.json")
    monkeypatch.setattr(Settings, "_instance", settings)
    return settings


@pytest.fixture
def fake_trash(tmp_path, monkeypatch):
    """Replace send2trash with a move into a temp trash directory."""
    trash_dir = tmp_path / "Trash"
    trash_dir.mkdir()
    trashed: list[str] = []

    def _send2trash(path: str) -> None:
        src = Path(path)
        if not src.exists():
            raise FileNotFoundError(2, "No such file or directory", path)
        shutil.move(str(src), str(trash_dir / src.name))
        trashed.append(path)

    monkeypatch.setattr("claudeshelf.core.file_operations.send2trash", _send2trash)
    return trashed


@pytest.fixture
def make_file(tmp_path):
    """Create a file below tmp_path and return its path."""

    def _make(relative: str, content: str = "test") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def make_entry():
    """Build a FileEntry without touching the filesystem."""

    def _make(
        path: str = "/tmp/claudeshelf/settings.json",
        size: int = 100,
        age_days: float = 0,
        category: Category = Category.SETTINGS,
        project: str | None = None,
    ) -> FileEntry:
        name = Path(path).name
        return FileEntry(
            id=generate_id(path),
            name=name,
            path=path,
            display_name=f"{project}/{name}" if project else name,
            category=category,
            scope=Scope.PROJECT if project else Scope.GLOBAL,
            project=project,
            size=size,
            modified=datetime.now(timezone.utc) - timedelta(days=age_days),
            read_only=False,
        )

    return _make
