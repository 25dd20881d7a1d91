"""Per-collection replication results."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class CollectionStatus(str, Enum):
    """Terminal status of one collection in a run."""
    EMPTY = "empty"
    NO_NEW_DOCS = "no-new-docs"
    DRY_RUN = "dry-run"
    SCHEMA_VALIDATION_FAILED = "schema-validation-failed"
    NO_SOURCE_FILE = "no-source-file"
    SOURCE_EMPTY = "source-empty"
    IMPORTED = "imported"
    EXPORTED = "exported"
    INCREMENTAL_COPIED = "incremental-copied"
    COPIED = "copied"
    FAILED = "failed"


FAILURE_STATUSES = frozenset({
    CollectionStatus.SCHEMA_VALIDATION_FAILED,
    CollectionStatus.FAILED,
})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CollectionResult:
    """Outcome of replicating a single collection."""
    name: str
    status: CollectionStatus
    copied: int = 0
    total: int = 0
    error: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: datetime = field(default_factory=_utcnow)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    @property
    def is_failure(self) -> bool:
        return self.status in FAILURE_STATUSES

    def summary_line(self) -> str:
        """Render as ``name: status (copied/total)``."""
        line = f"{self.name}: {self.status.value} ({self.copied}/{self.total})"
        if self.error:
            line += f" - {self.error}"
        return line

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "copied": self.copied,
            "total": self.total,
            "status": self.status.value,
            "error": self.error,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
        }
