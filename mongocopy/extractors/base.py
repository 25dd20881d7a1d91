"""Base extractor interface."""

from abc import ABC, abstractmethod
from typing import Any, AsyncGenerator, AsyncIterable, Dict, List, Optional
import inspect
import logging

from ..models.result import CollectionStatus

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


async def _close_source(documents: AsyncIterable[Document]) -> None:
    close = getattr(documents, "aclose", None) or getattr(documents, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result


async def batched(
    documents: AsyncIterable[Document],
    batch_size: int
) -> AsyncGenerator[List[Document], None]:
    """
    Group an async document stream into bounded batches.

    Every batch holds ``batch_size`` documents except possibly the last,
    which holds the remainder. Documents keep their iteration order and
    each one appears in exactly one batch. The source is closed when the
    stream is exhausted or the generator is closed early.

    Args:
        documents: Single-pass async iterable (usually a cursor)
        batch_size: Maximum documents per batch

    Yields:
        Lists of documents
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    try:
        batch: List[Document] = []
        async for document in documents:
            batch.append(document)
            if len(batch) >= batch_size:
                yield batch
                batch = []

        if batch:
            yield batch
    finally:
        await _close_source(documents)


class BaseExtractor(ABC):
    """
    Base class for the read side of a collection transfer.

    Extractors are responsible for counting, sampling and streaming the
    documents of one collection, and for reporting its index definitions.
    """

    def __init__(self, name: str):
        """
        Initialize the extractor.

        Args:
            name: Collection name
        """
        self.name = name

    async def precheck(self) -> Optional[CollectionStatus]:
        """
        Check that the source can be read at all.

        Returns:
            A terminal status to record instead of transferring, or None
        """
        return None

    @abstractmethod
    async def count(self, query: Dict[str, Any]) -> int:
        """Count documents matching the filter."""
        pass

    @abstractmethod
    async def find_one(self, query: Dict[str, Any]) -> Optional[Document]:
        """Return one document matching the filter, or None."""
        pass

    @abstractmethod
    def iterate(self, query: Dict[str, Any]) -> AsyncIterable[Document]:
        """Return a single-pass async iterable over matching documents."""
        pass

    @abstractmethod
    async def list_indexes(self) -> List[Document]:
        """Return the raw index documents of the collection."""
        pass

    def stream(self, query: Dict[str, Any], batch_size: int) -> AsyncGenerator[List[Document], None]:
        """
        Stream matching documents in batches.

        Args:
            query: Transfer filter
            batch_size: Size of each batch

        Yields:
            Batches of documents
        """
        return batched(self.iterate(query), batch_size)
