"""Base loader interface for replication targets."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List
import logging

from pymongo.errors import BulkWriteError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


@dataclass
class LoadResult:
    """Result of writing one batch."""
    collection: str
    total_attempted: int = 0
    total_failed: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total_succeeded(self) -> int:
        return self.total_attempted - self.total_failed

    def absorb(self, error: BulkWriteError) -> None:
        """Record the per-document failures of an unordered bulk write."""
        write_errors = (error.details or {}).get("writeErrors", [])
        self.total_failed += len(write_errors)
        self.errors.extend(write_errors)
        logger.warning(
            f"{len(write_errors)} of {self.total_attempted} write(s) failed in "
            f"{self.collection} batch, continuing"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "collection": self.collection,
            "total_attempted": self.total_attempted,
            "total_succeeded": self.total_succeeded,
            "total_failed": self.total_failed,
        }


class BaseLoader(ABC):
    """
    Base class for write strategies.

    A loader is created per collection. The orchestrator calls ``prepare``
    once before the first batch, ``load_batch`` for every batch, including
    the final partial one, and ``finalize`` after the stream is exhausted.
    """

    def __init__(self, name: str):
        """
        Initialize the loader.

        Args:
            name: Collection name
        """
        self.name = name

    async def prepare(self) -> None:
        """Get the target ready for the first batch."""

    @abstractmethod
    async def load_batch(self, documents: List[Document]) -> LoadResult:
        """
        Write one batch to the target.

        Args:
            documents: Batch of source documents

        Returns:
            LoadResult; ``total_attempted`` always equals the batch size
        """
        pass

    async def finalize(self) -> None:
        """Flush anything buffered once the stream is exhausted."""
