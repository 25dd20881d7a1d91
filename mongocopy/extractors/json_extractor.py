"""JSON artifact extractor used by import mode."""

import asyncio
import logging
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

from .base import BaseExtractor, Document
from .. import artifacts
from ..models.result import CollectionStatus

logger = logging.getLogger(__name__)


class JsonFileExtractor(BaseExtractor):
    """
    Reads a collection snapshot from an export directory.

    Imported documents are not filtered again: the export already applied
    the transfer filter, so ``count`` and ``iterate`` ignore the query.
    Files are read in a worker thread.
    """

    def __init__(self, name: str, output_dir: str):
        """
        Initialize the extractor.

        Args:
            name: Collection name
            output_dir: Directory holding the export artifacts
        """
        super().__init__(name)
        self.output_dir = output_dir
        self.data_file: Path = artifacts.data_path(output_dir, name)
        self.index_file: Path = artifacts.index_path(output_dir, name)
        self._documents: Optional[List[Document]] = None

    async def _load(self) -> List[Document]:
        if self._documents is None:
            self._documents = await asyncio.to_thread(artifacts.read_documents, self.data_file)
            logger.info(f"Loaded {len(self._documents)} document(s) from {self.data_file}")
        return self._documents

    async def precheck(self) -> Optional[CollectionStatus]:
        if not self.data_file.exists():
            return CollectionStatus.NO_SOURCE_FILE
        if not await self._load():
            return CollectionStatus.SOURCE_EMPTY
        return None

    async def count(self, query: Dict[str, Any]) -> int:
        return len(await self._load())

    async def find_one(self, query: Dict[str, Any]) -> Optional[Document]:
        documents = await self._load()
        return dict(documents[0]) if documents else None

    async def iterate(self, query: Dict[str, Any]) -> AsyncIterator[Document]:
        for document in await self._load():
            yield document

    async def list_indexes(self) -> List[Document]:
        if not self.index_file.exists():
            logger.info(f"No index file for {self.name}")
            return []
        return await asyncio.to_thread(artifacts.read_documents, self.index_file)
