"""CLI interface for ClaudeShelf."""

from __future__ import annotations

import json
import logging
import sys
import time
from pathlib import Path

import click

from claudeshelf.core import cleanup
from claudeshelf.core.engine import ShelfEngine
from claudeshelf.core.file_operations import FileOperationError
from claudeshelf.core.watcher import FileWatcher
from claudeshelf.models.category import Category
from claudeshelf.models.operation_result import OperationResult
from claudeshelf.models.scan_location import add_location, remove_location, set_enabled
from claudeshelf.models.scan_result import FileEntry, ScanResult
from claudeshelf.settings import Settings
from claudeshelf.storage import load_locations, save_locations
from claudeshelf.utils import bytes_to_human, format_age, format_elapsed

_CATEGORY_CHOICE = click.Choice([c.value for c in Category])


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _build_engine(debounce_interval: float | None = None) -> ShelfEngine:
    settings = Settings.instance()
    interval = debounce_interval or float(settings.get("watcher.debounce_interval"))
    return ShelfEngine(load_locations(), watcher=FileWatcher(debounce_interval=interval))


def _run_scan(engine: ShelfEngine) -> ScanResult:
    result = engine.scan()
    if result is None:
        raise click.ClickException("A scan is already in progress.")
    return result


def _print_errors(errors: list[str]) -> None:
    if not errors:
        return
    click.echo(f"\n  {click.style(f'{len(errors)} location error(s):', fg='yellow')}")
    for error in errors:
        click.echo(f"    {click.style('!', fg='yellow')} {error}")


def _print_operation(result: OperationResult) -> None:
    verb = "Trashed" if result.action == "trash" else "Deleted"
    for path in result.succeeded:
        click.echo(f"  {click.style('✓', fg='green')} {verb} {path}")
    for error in result.errors:
        click.echo(f"  {click.style('✗', fg='red')} {error}", err=True)
    if not result.ok:
        click.echo(result.summary, err=True)


def _entry_line(entry: FileEntry) -> str:
    ro_tag = click.style(" [read-only]", fg="yellow") if entry.read_only else ""
    return (
        f"    {click.style(entry.display_name, fg='cyan'):40s} "
        f"{bytes_to_human(entry.size):>9s}  {format_age(entry.modified):>14s}{ro_tag}"
    )


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """ClaudeShelf: find and tidy Claude configuration files."""
    _setup_logging(verbose)


# ── scan ─────────────────────────────────────────────────────────────────

@main.command()
@click.option("--category", "-c", type=_CATEGORY_CHOICE, default=None, help="Only show this category")
@click.option("--search", "-s", default="", help="Filter by name, path or project")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def scan(category: str | None, search: str, as_json: bool) -> None:
    """Scan all enabled locations and list discovered files."""
    engine = _build_engine()
    result = _run_scan(engine)
    selected = Category(category) if category else None
    files = engine.index.filtered(category=selected, search=search)

    if as_json:
        data = {
            "duration": result.duration,
            "errors": result.errors,
            "files": [f.to_dict() for f in files],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not files:
        click.echo("No files found.")
        _print_errors(result.errors)
        return

    by_category: dict[Category, list[FileEntry]] = {}
    for entry in files:
        by_category.setdefault(entry.category, []).append(entry)

    for cat in sorted(by_category, key=lambda c: c.priority):
        members = by_category[cat]
        size = sum(e.size for e in members)
        click.echo(
            f"\n  {click.style(cat.display_name, fg='blue', bold=True)} "
            f"({len(members)} files, {bytes_to_human(size)})"
        )
        for entry in members:
            click.echo(_entry_line(entry))

    _print_errors(result.errors)
    click.echo(
        f"\nFound {click.style(str(len(files)), bold=True)} files "
        f"in {format_elapsed(result.duration)}\n"
    )


# ── cleanup ──────────────────────────────────────────────────────────────

@main.command("cleanup")
@click.option("--clean", is_flag=True, help="Remove the flagged files after confirmation")
@click.option(
    "--action",
    type=click.Choice(["trash", "delete"]),
    default=None,
    help="How to remove flagged files (default from settings: cleanup.action)",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def cleanup_cmd(clean: bool, action: str | None, yes: bool, as_json: bool) -> None:
    """Report empty and stale files, optionally removing them."""
    engine = _build_engine()
    _run_scan(engine)
    items = engine.cleanup_candidates()

    if as_json and not clean:
        data = [
            {
                "id": item.id,
                "reason": item.reason.value,
                "detail": item.detail,
                "entry": item.entry.to_dict(),
            }
            for item in items
        ]
        click.echo(json.dumps(data, indent=2))
        return

    if not items:
        click.echo("Nothing to clean up.")
        return

    if not as_json:
        for reason, members in cleanup.grouped(items):
            click.echo(f"\n  {click.style(reason.value, fg='blue', bold=True)} ({len(members)})")
            for item in members:
                click.echo(f"    {click.style(item.entry.display_name, fg='cyan'):40s} {item.detail}")
        click.echo()

    if not clean:
        return

    paths = [entry.path for entry in cleanup.unique_entries(items)]
    action = action or Settings.instance().get("cleanup.action")
    if not yes and not as_json:
        verb = "Move to trash" if action == "trash" else "Permanently delete"
        if not click.confirm(f"{verb} {len(paths)} file(s)?", default=False):
            click.echo("Aborted.")
            return

    result = engine.trash(paths) if action == "trash" else engine.delete(paths)
    if as_json:
        click.echo(json.dumps(
            {"action": result.action, "succeeded": result.succeeded, "errors": result.errors},
            indent=2,
        ))
    else:
        _print_operation(result)
    if not result.ok:
        sys.exit(1)


# ── trash / delete ───────────────────────────────────────────────────────

@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
def trash(paths: tuple[str, ...]) -> None:
    """Move files to the trash."""
    engine = _build_engine()
    result = engine.trash([str(Path(p).absolute()) for p in paths])
    _print_operation(result)
    if not result.ok:
        sys.exit(1)


@main.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete(paths: tuple[str, ...], yes: bool) -> None:
    """Permanently delete files (cannot be undone)."""
    if not yes and not click.confirm(f"Permanently delete {len(paths)} file(s)?", default=False):
        click.echo("Aborted.")
        return
    engine = _build_engine()
    result = engine.delete([str(Path(p).absolute()) for p in paths])
    _print_operation(result)
    if not result.ok:
        sys.exit(1)


# ── save ─────────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path())
@click.option("--create", is_flag=True, help="Create a new file (mode 0600) instead of replacing one")
def save(path: str, create: bool) -> None:
    """Write stdin to a file, keeping its permissions."""
    content = click.get_text_stream("stdin").read()
    engine = _build_engine()
    try:
        if create:
            engine.create(path, content)
        else:
            engine.save(path, content)
    except FileOperationError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    click.echo(f"  {click.style('✓', fg='green')} Saved {path}")


# ── watch ────────────────────────────────────────────────────────────────

@main.command()
@click.option("--interval", "-i", type=float, default=None, help="Quiet period in seconds before rescanning")
def watch(interval: float | None) -> None:
    """Rescan whenever files in the scan locations change."""
    engine = _build_engine(debounce_interval=interval)
    initial = _run_scan(engine)
    click.echo(f"Indexed {len(initial.files)} files. Watching for changes (Ctrl+C to stop)...")

    def on_result(result: ScanResult) -> None:
        click.echo(
            f"  {click.style('↻', fg='cyan')} Rescanned: {len(result.files)} files "
            f"in {format_elapsed(result.duration)}"
        )

    watched = engine.watch(lambda: engine.scan_async(on_result=on_result))
    if not watched:
        click.echo("No existing locations to watch.", err=True)
        engine.shutdown()
        sys.exit(1)

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nStopping.")
    finally:
        engine.shutdown()


# ── locations ────────────────────────────────────────────────────────────

@main.group()
def locations() -> None:
    """Scan location management commands."""


@locations.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def locations_list(as_json: bool) -> None:
    """List scan locations."""
    locs = load_locations()
    if as_json:
        click.echo(json.dumps([loc.to_dict() for loc in locs], indent=2))
        return
    for loc in locs:
        status = click.style("enabled", fg="green") if loc.enabled else click.style("disabled", fg="bright_black")
        builtin_tag = click.style(" [built-in]", fg="blue") if loc.builtin else ""
        click.echo(f"  {loc.display_name:30s} {status}{builtin_tag}")


@locations.command("add")
@click.argument("path", type=click.Path(file_okay=False))
def locations_add(path: str) -> None:
    """Add a custom scan location."""
    locs = load_locations()
    resolved = str(Path(path).expanduser().absolute())
    if add_location(locs, resolved):
        save_locations(locs)
        click.echo(f"Added {resolved}")
    else:
        click.echo(f"{resolved} is already a scan location.")


@locations.command("remove")
@click.argument("path", type=click.Path())
def locations_remove(path: str) -> None:
    """Remove a custom scan location (built-in ones can only be disabled)."""
    locs = load_locations()
    resolved = str(Path(path).expanduser().absolute())
    if not remove_location(locs, resolved):
        click.echo(f"Cannot remove {resolved}: not a custom scan location.", err=True)
        sys.exit(1)
    save_locations(locs)
    click.echo(f"Removed {resolved}")


def _toggle(path: str, enabled: bool) -> None:
    locs = load_locations()
    resolved = str(Path(path).expanduser().absolute())
    if not set_enabled(locs, resolved, enabled):
        click.echo(f"{resolved} is not a scan location.", err=True)
        sys.exit(1)
    save_locations(locs)
    click.echo(f"{'Enabled' if enabled else 'Disabled'} {resolved}")


@locations.command("enable")
@click.argument("path", type=click.Path())
def locations_enable(path: str) -> None:
    """Include a location in scans."""
    _toggle(path, True)


@locations.command("disable")
@click.argument("path", type=click.Path())
def locations_disable(path: str) -> None:
    """Exclude a location from scans."""
    _toggle(path, False)


# ── service ──────────────────────────────────────────────────────────────

@main.group()
def service() -> None:
    """D-Bus service management."""


@service.command("start")
def service_start() -> None:
    """Start the D-Bus service in foreground."""
    from claudeshelf.dbus_service import start_service

    click.echo("Starting ClaudeShelf D-Bus service...")
    start_service()
