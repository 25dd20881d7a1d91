"""Document extractors for replication sources."""

from .base import BaseExtractor, batched
from .json_extractor import JsonFileExtractor
from .mongo_extractor import MongoExtractor

__all__ = [
    "BaseExtractor",
    "batched",
    "JsonFileExtractor",
    "MongoExtractor",
]
