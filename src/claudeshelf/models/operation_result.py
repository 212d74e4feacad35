"""Bulk file operation result dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class OperationResult:
    """Result of a best-effort bulk trash or delete."""

    action: str
    succeeded: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.errors)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def summary(self) -> str:
        return f"{self.succeeded_count} file(s) processed, {self.failed_count} file(s) failed"
