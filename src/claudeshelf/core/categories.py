"""Category assignment for discovered files.

Rules are checked in order and the first match wins, so a later rule never
sees a file an earlier rule accepted (``.../plans/agents/x.md`` is an agent,
not a plan). Paths are matched by plain substring on a lower-cased,
forward-slash form.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable

from claudeshelf.models.category import Category


@dataclass(frozen=True, slots=True)
class _Subject:
    name: str
    path: str
    extension: str
    inside_marker: bool


Rule = tuple[Callable[[_Subject], bool], Category]

RULES: tuple[Rule, ...] = (
    (lambda s: "/agents/" in s.path and s.extension == "md", Category.AGENTS),
    (lambda s: "/debug/" in s.path, Category.DEBUG),
    (lambda s: "/memory/" in s.path or s.name.lower() == "memory.md", Category.MEMORY),
    (lambda s: s.name == "CLAUDE.md" and not s.inside_marker, Category.PROJECT_CONFIG),
    (lambda s: s.name in ("settings.json", ".clauderc"), Category.SETTINGS),
    (
        lambda s: s.inside_marker and s.extension == "sh" and "/shell-snapshots/" not in s.path,
        Category.SETTINGS,
    ),
    (lambda s: s.name == "stats-cache.json", Category.SETTINGS),
    (lambda s: "/todos/" in s.path or "/tasks/" in s.path, Category.TODOS),
    (lambda s: "/plans/" in s.path, Category.PLANS),
    (lambda s: "/skills/" in s.path, Category.SKILLS),
    # Only reachable for CLAUDE.md inside .claude; .clauderc never gets past
    # the settings rule.
    (lambda s: s.name in ("CLAUDE.md", ".clauderc"), Category.PROJECT_CONFIG),
)


def file_extension(name: str) -> str:
    """Lower-cased extension without the dot; empty for ``.clauderc``-style names."""
    return os.path.splitext(name)[1][1:].lower()


def assign_category(name: str, path: str, inside_marker: bool) -> Category:
    """Return the category of a file given its name, absolute path and location."""
    subject = _Subject(
        name=name,
        path=path.replace("\\", "/").lower(),
        extension=file_extension(name),
        inside_marker=inside_marker,
    )
    for predicate, category in RULES:
        if predicate(subject):
            return category
    return Category.OTHER
