"""Tests for project name decoding and scope detection."""

from __future__ import annotations

from claudeshelf.core.path_decoder import decode_project_name, detect_scope, display_name
from claudeshelf.models.category import Scope

HOME = "/Users/kevin"


class TestDecodeProjectName:
    def test_basic(self):
        assert decode_project_name("-home-user-Projects-MyApp") == "MyApp"

    def test_last_meaningful_segment_wins(self):
        # "kevin" and "my" survive too, but "tool" is last
        assert decode_project_name("-Users-kevin-code-my-tool") == "tool"

    def test_all_noise_returns_none(self):
        assert decode_project_name("-home-user-Projects") is None
        assert decode_project_name("-home-user-src") is None

    def test_github_prefix(self):
        assert decode_project_name("-Users-kevin-Github-ClaudeShelf") == "ClaudeShelf"

    def test_drive_letter_dropped(self):
        assert decode_project_name("-C-Users-kevin-Projects-MyApp") == "MyApp"

    def test_noise_match_is_case_sensitive(self):
        assert decode_project_name("-home-user-SRC") == "SRC"

    def test_empty(self):
        assert decode_project_name("") is None


class TestDetectScope:
    def test_encoded_project_directory(self):
        scope, project = detect_scope(
            f"{HOME}/.claude/projects/-Users-kevin-code-MyApp/settings.json", HOME
        )
        assert scope is Scope.PROJECT
        assert project == "MyApp"

    def test_projects_directory_with_noise_only_name(self):
        scope, project = detect_scope(f"{HOME}/.claude/projects/-Users-src/a.jsonl", HOME)
        assert scope is Scope.PROJECT
        assert project is None

    def test_global(self):
        scope, project = detect_scope(f"{HOME}/.claude/settings.json", HOME)
        assert scope is Scope.GLOBAL
        assert project is None

    def test_nested_marker_directory(self):
        scope, project = detect_scope(f"{HOME}/projects/MyApp/.claude/settings.json", HOME)
        assert scope is Scope.PROJECT
        assert project == "MyApp"

    def test_claude_md_in_project(self):
        scope, project = detect_scope(f"{HOME}/projects/MyApp/CLAUDE.md", HOME)
        assert scope is Scope.PROJECT
        assert project == "MyApp"

    def test_clauderc_in_home_is_global(self):
        scope, project = detect_scope(f"{HOME}/.clauderc", HOME)
        assert scope is Scope.GLOBAL
        assert project is None

    def test_home_with_trailing_slash(self):
        scope, project = detect_scope(f"{HOME}/.claude/settings.json", HOME + "/")
        assert scope is Scope.GLOBAL
        assert project is None

    def test_projects_prefix_checked_before_marker(self):
        # Would otherwise resolve to "kevin" as the directory above .claude
        scope, project = detect_scope(f"{HOME}/.claude/projects/-home-x-Foo/CLAUDE.md", HOME)
        assert scope is Scope.PROJECT
        assert project == "Foo"

    def test_claude_md_at_filesystem_root(self):
        scope, project = detect_scope("/CLAUDE.md", HOME)
        assert scope is Scope.GLOBAL
        assert project is None


class TestDisplayName:
    def test_with_project(self):
        assert display_name("CLAUDE.md", "MyApp") == "MyApp/CLAUDE.md"

    def test_without_project(self):
        assert display_name("settings.json", None) == "settings.json"
