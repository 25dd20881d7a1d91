"""Pydantic models for API requests and responses."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import Settings
from ..models.job import DEFAULT_OUTPUT_DIR, DEFAULT_TIMESTAMP_FIELD
from ..models.result import CollectionResult, CollectionStatus


# Request Models
class ReplicationRequest(BaseModel):
    collections: List[str] = Field(default_factory=list)
    dry_run: bool = False
    batch_size: Optional[int] = Field(default=None, ge=1)
    export_mode: bool = False
    import_mode: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    copy_indexes: bool = False
    validate_schema: bool = False
    incremental: bool = False
    timestamp_field: str = DEFAULT_TIMESTAMP_FIELD
    since: Optional[datetime] = None
    include_untimestamped: bool = False

    # Overrides for the environment settings
    source_uri: Optional[str] = None
    target_uri: Optional[str] = None
    db_name: Optional[str] = None

    def to_job_dict(self, settings: Settings) -> Dict[str, Any]:
        """Merge with environment settings into ``JobConfig.from_dict`` input."""
        data = self.model_dump(exclude={"source_uri", "target_uri", "db_name", "batch_size"})
        data.update({
            "source_uri": self.source_uri or settings.source_uri,
            "target_uri": self.target_uri or settings.target_uri,
            "db_name": self.db_name or settings.db_name,
            "batch_size": self.batch_size or settings.batch_size,
            "show_progress": False,
        })
        return data


# Response Models
class CollectionResultResponse(BaseModel):
    name: str
    status: CollectionStatus
    copied: int
    total: int
    error: Optional[str] = None
    duration_seconds: Optional[float] = None

    @classmethod
    def from_result(cls, result: CollectionResult) -> "CollectionResultResponse":
        return cls(
            name=result.name,
            status=result.status,
            copied=result.copied,
            total=result.total,
            error=result.error,
            duration_seconds=result.duration_seconds,
        )


class ReplicationResponse(BaseModel):
    results: List[CollectionResultResponse]
    total_copied: int
    failed: List[str] = Field(default_factory=list)
