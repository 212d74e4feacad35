"""ClaudeShelf data models."""

from claudeshelf.models.category import Category, Scope
from claudeshelf.models.cleanup_item import CleanupItem, CleanupReason
from claudeshelf.models.operation_result import OperationResult
from claudeshelf.models.scan_location import ScanLocation
from claudeshelf.models.scan_result import DiscoveredFile, FileEntry, ScanResult, generate_id

__all__ = [
    "Category",
    "CleanupItem",
    "CleanupReason",
    "DiscoveredFile",
    "FileEntry",
    "OperationResult",
    "ScanLocation",
    "ScanResult",
    "Scope",
    "generate_id",
]
