"""Replication job configuration."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from dateutil import parser as date_parser

from ..exceptions import ConfigError

DEFAULT_BATCH_SIZE = 1000
DEFAULT_OUTPUT_DIR = "./backup"
DEFAULT_TIMESTAMP_FIELD = "_updatedAt"


class JobMode(str, Enum):
    """Where documents are read from and written to."""
    COPY = "copy"  # Source deployment -> target deployment
    EXPORT = "export"  # Source deployment -> JSON artifacts
    IMPORT = "import"  # JSON artifacts -> target deployment


@dataclass(frozen=True)
class JobConfig:
    """Configuration for a replication run."""
    db_name: str
    source_uri: Optional[str] = None
    target_uri: Optional[str] = None

    # Empty means every collection on the source
    collections: Tuple[str, ...] = field(default_factory=tuple)
    batch_size: int = DEFAULT_BATCH_SIZE

    # Mode flags
    dry_run: bool = False
    export_mode: bool = False
    import_mode: bool = False
    incremental: bool = False
    copy_indexes: bool = False
    validate_schema: bool = False
    show_progress: bool = True

    # Artifacts
    output_dir: str = DEFAULT_OUTPUT_DIR

    # Incremental parameters
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD
    since: Optional[datetime] = None
    include_untimestamped: bool = False

    @property
    def mode(self) -> JobMode:
        if self.export_mode:
            return JobMode.EXPORT
        if self.import_mode:
            return JobMode.IMPORT
        return JobMode.COPY

    @property
    def needs_source(self) -> bool:
        return self.mode != JobMode.IMPORT

    @property
    def needs_target(self) -> bool:
        return self.mode != JobMode.EXPORT

    def validate(self) -> "JobConfig":
        """
        Check the configuration once before a run.

        Returns:
            The same config, so calls can be chained

        Raises:
            ConfigError: If any option is missing or contradictory
        """
        errors: List[str] = []

        if not self.db_name or not self.db_name.strip():
            errors.append("Database name is required")

        if self.export_mode and self.import_mode:
            errors.append("Export and import mode cannot be used together")

        if self.needs_source and not self.source_uri:
            errors.append("Source URI is required")

        if self.needs_target and not self.target_uri:
            errors.append("Target URI is required")

        if not isinstance(self.batch_size, int) or self.batch_size < 1:
            errors.append(f"Batch size must be a positive integer, got {self.batch_size!r}")

        if self.incremental and not (self.timestamp_field or "").strip():
            errors.append("Incremental mode requires a timestamp field")

        if errors:
            raise ConfigError("; ".join(errors))

        return self

    def with_overrides(self, **changes: Any) -> "JobConfig":
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (URIs are left out)."""
        return {
            "db_name": self.db_name,
            "collections": list(self.collections),
            "batch_size": self.batch_size,
            "mode": self.mode.value,
            "dry_run": self.dry_run,
            "incremental": self.incremental,
            "copy_indexes": self.copy_indexes,
            "validate_schema": self.validate_schema,
            "show_progress": self.show_progress,
            "output_dir": self.output_dir,
            "timestamp_field": self.timestamp_field,
            "since": self.since.isoformat() if self.since else None,
            "include_untimestamped": self.include_untimestamped,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobConfig":
        """
        Create from dictionary representation.

        A single collection name may be given as a plain string. The
        ``mode`` key written by ``to_dict`` is accepted and mapped back to
        the export/import flags.

        Raises:
            ConfigError: If ``data`` holds keys that are not job options
                or an unknown ``mode``
        """
        allowed = {f.name for f in fields(cls)} | {"mode"}
        unknown = sorted(set(data) - allowed)
        if unknown:
            raise ConfigError(f"Unknown option(s): {', '.join(unknown)}")

        try:
            mode = JobMode(data["mode"]) if data.get("mode") else None
        except ValueError:
            raise ConfigError(f"Unknown mode: {data['mode']!r}")

        collections = data.get("collections") or ()
        if isinstance(collections, str):
            collections = (collections,)

        since = data.get("since")
        if isinstance(since, str):
            since = date_parser.isoparse(since)

        return cls(
            db_name=data.get("db_name", ""),
            source_uri=data.get("source_uri"),
            target_uri=data.get("target_uri"),
            collections=tuple(collections),
            batch_size=data.get("batch_size", DEFAULT_BATCH_SIZE),
            dry_run=data.get("dry_run", False),
            export_mode=data.get("export_mode", mode == JobMode.EXPORT),
            import_mode=data.get("import_mode", mode == JobMode.IMPORT),
            incremental=data.get("incremental", False),
            copy_indexes=data.get("copy_indexes", False),
            validate_schema=data.get("validate_schema", False),
            show_progress=data.get("show_progress", True),
            output_dir=data.get("output_dir") or DEFAULT_OUTPUT_DIR,
            timestamp_field=data.get("timestamp_field", DEFAULT_TIMESTAMP_FIELD),
            since=since,
            include_untimestamped=data.get("include_untimestamped", False),
        )
