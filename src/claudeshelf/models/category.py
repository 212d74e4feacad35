"""File category and scope enums."""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """The nine categories a discovered configuration file can belong to.

    Assignment is decided by rule order in ``core.categories``; ``priority``
    mirrors that order and is only used for display sorting.
    """

    AGENTS = "agents"
    DEBUG = "debug"
    MEMORY = "memory"
    PROJECT_CONFIG = "project-config"
    SETTINGS = "settings"
    TODOS = "todos"
    PLANS = "plans"
    SKILLS = "skills"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def priority(self) -> int:
        """Lower number = higher priority."""
        return _PRIORITIES[self]


_DISPLAY_NAMES = {
    Category.AGENTS: "Agents",
    Category.DEBUG: "Debug",
    Category.MEMORY: "Memory",
    Category.PROJECT_CONFIG: "Project Config",
    Category.SETTINGS: "Settings",
    Category.TODOS: "Todos",
    Category.PLANS: "Plans",
    Category.SKILLS: "Skills",
    Category.OTHER: "Other",
}

_PRIORITIES = {category: index for index, category in enumerate(Category, start=1)}


class Scope(str, Enum):
    """Whether a file is user-wide or tied to a single project."""

    GLOBAL = "global"
    PROJECT = "project"
