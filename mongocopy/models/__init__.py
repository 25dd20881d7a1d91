"""Data models for the replication engine."""

from .job import (
    JobConfig,
    JobMode,
)
from .result import (
    CollectionResult,
    CollectionStatus,
)
from .index import IndexDefinition

__all__ = [
    "JobConfig",
    "JobMode",
    "CollectionResult",
    "CollectionStatus",
    "IndexDefinition",
]
