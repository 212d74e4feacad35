"""Project name decoding and scope detection.

Claude stores per-project data under ``~/.claude/projects/<encoded>/`` where
``<encoded>`` is the project's absolute path with ``/`` replaced by ``-``,
e.g. ``-home-user-Projects-MyApp`` for ``/home/user/Projects/MyApp``.
"""

from __future__ import annotations

import posixpath

from claudeshelf.models.category import Scope

# Path segments that never name a project.
_COMMON_PREFIXES = frozenset({
    "home", "Users", "user", "Documents", "Desktop",
    "Projects", "projects", "src", "dev", "code",
    "workspace", "repos", "Github", "github", "Repos",
})

_MARKER_SEGMENT = "/.claude/"


def decode_project_name(encoded: str) -> str | None:
    """Return the last meaningful segment of an encoded project directory name.

    Single-character segments (drive letters) and common path noise are
    dropped. Returns None when nothing meaningful is left.
    """
    meaningful = [
        segment
        for segment in encoded.split("-")
        if len(segment) > 1 and segment not in _COMMON_PREFIXES
    ]
    return meaningful[-1] if meaningful else None


def detect_scope(path: str, home: str) -> tuple[Scope, str | None]:
    """Determine the scope of a file and the project it belongs to, if any."""
    home = home[:-1] if home.endswith("/") else home
    claude_base = f"{home}/.claude/"
    projects_base = f"{home}/.claude/projects/"

    if path.startswith(projects_base):
        components = [c for c in path[len(projects_base):].split("/") if c]
        if components:
            return Scope.PROJECT, decode_project_name(components[0])
        return Scope.PROJECT, None

    if path.startswith(claude_base):
        return Scope.GLOBAL, None

    index = path.find(_MARKER_SEGMENT)
    if index != -1:
        parent_name = posixpath.basename(path[:index])
        return Scope.PROJECT, parent_name or None

    if posixpath.basename(path) == "CLAUDE.md":
        project = posixpath.basename(posixpath.dirname(path))
        if project and project != "/":
            return Scope.PROJECT, project

    return Scope.GLOBAL, None


def display_name(name: str, project: str | None) -> str:
    """Prefix a filename with its project name when there is one."""
    if project:
        return f"{project}/{name}"
    return name
