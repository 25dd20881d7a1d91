"""Write strategies for replication targets."""

from .base import BaseLoader, LoadResult
from .json_loader import JsonExportLoader
from .mongo_loader import FullReplaceLoader, IncrementalUpsertLoader

__all__ = [
    "BaseLoader",
    "LoadResult",
    "JsonExportLoader",
    "FullReplaceLoader",
    "IncrementalUpsertLoader",
]
