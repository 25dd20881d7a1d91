"""MongoDB collection extractor."""

import logging
from typing import Any, AsyncIterable, Dict, List, Optional

from .base import BaseExtractor, Document

logger = logging.getLogger(__name__)


class MongoExtractor(BaseExtractor):
    """Reads documents from a live source collection."""

    def __init__(self, collection):
        """
        Initialize the extractor.

        Args:
            collection: An ``AsyncCollection`` on the source deployment
        """
        super().__init__(collection.name)
        self.collection = collection

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.collection.count_documents(query)

    async def find_one(self, query: Dict[str, Any]) -> Optional[Document]:
        return await self.collection.find_one(query)

    def iterate(self, query: Dict[str, Any]) -> AsyncIterable[Document]:
        return self.collection.find(query)

    async def list_indexes(self) -> List[Document]:
        cursor = await self.collection.list_indexes()
        return [dict(index) async for index in cursor]
