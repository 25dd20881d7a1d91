"""Service layer for the replication engine."""

from .index_replicator import IndexReplicator
from .progress import (
    NullProgressReporter,
    ProgressReporter,
    TqdmProgressReporter,
    create_reporter,
)
from .query_builder import build_query, query_for_job
from .schema_probe import SchemaProbe

__all__ = [
    "IndexReplicator",
    "NullProgressReporter",
    "ProgressReporter",
    "TqdmProgressReporter",
    "create_reporter",
    "build_query",
    "query_for_job",
    "SchemaProbe",
]
