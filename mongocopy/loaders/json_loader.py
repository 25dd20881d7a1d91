"""JSON artifact loader used by export mode."""

import asyncio
import logging
from typing import Any, Dict, List

from .base import BaseLoader, Document, LoadResult
from .. import artifacts

logger = logging.getLogger(__name__)


class JsonExportLoader(BaseLoader):
    """
    Buffers streamed batches and writes them as one JSON array.

    File writes run in a worker thread so a large export does not block
    the event loop.
    """

    def __init__(self, name: str, output_dir: str):
        super().__init__(name)
        self.output_dir = output_dir
        self.data_file = artifacts.data_path(output_dir, name)
        self.index_file = artifacts.index_path(output_dir, name)
        self._documents: List[Document] = []

    async def prepare(self) -> None:
        self._documents = []
        await asyncio.to_thread(self.data_file.unlink, missing_ok=True)

    async def load_batch(self, documents: List[Document]) -> LoadResult:
        self._documents.extend(documents)
        return LoadResult(collection=self.name, total_attempted=len(documents))

    async def finalize(self) -> None:
        await asyncio.to_thread(artifacts.write_documents, self.data_file, self._documents)
        logger.info(f"Exported {len(self._documents)} document(s) to {self.data_file}")

    async def write_indexes(self, indexes: List[Dict[str, Any]]) -> None:
        """Write the collection's index documents next to its data file."""
        await asyncio.to_thread(artifacts.write_documents, self.index_file, indexes)
        logger.info(f"Exported {len(indexes)} index definition(s) to {self.index_file}")
