"""
MongoDB Collection Replication

A toolkit for replicating document collections between two MongoDB
deployments.

Supports:
- Full overwrite copies and incremental (timestamp-filtered) upserts
- Optional index replication
- Pre-flight schema probes against the target
- JSON export/import of collection snapshots
- Progress bars for long transfers
"""

__version__ = "1.0.0"

from .models.job import JobConfig
from .models.result import CollectionResult, CollectionStatus
from .orchestrator import ReplicationOrchestrator, copy_collections, replicate

__all__ = [
    "JobConfig",
    "CollectionResult",
    "CollectionStatus",
    "ReplicationOrchestrator",
    "copy_collections",
    "replicate",
]
