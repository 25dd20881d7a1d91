"""Write strategies against a live target collection."""

import logging
from typing import List

from pymongo import InsertOne, ReplaceOne
from pymongo.errors import BulkWriteError

from .base import BaseLoader, Document, LoadResult

logger = logging.getLogger(__name__)

ID_FIELD = "_id"


class FullReplaceLoader(BaseLoader):
    """
    Destructive overwrite of the target collection.

    Every existing target document is deleted before the first batch, then
    batches are inserted with unordered ``insert_many`` so one bad document
    does not stop the rest of its batch.
    """

    def __init__(self, collection):
        super().__init__(collection.name)
        self.collection = collection

    async def prepare(self) -> None:
        result = await self.collection.delete_many({})
        logger.info(f"Cleared {result.deleted_count} document(s) from target {self.name}")

    async def load_batch(self, documents: List[Document]) -> LoadResult:
        result = LoadResult(collection=self.name, total_attempted=len(documents))
        try:
            await self.collection.insert_many(documents, ordered=False)
        except BulkWriteError as e:
            result.absorb(e)
        return result


class IncrementalUpsertLoader(BaseLoader):
    """
    Idempotent upsert of every document by ``_id``.

    Existing target documents are replaced wholesale, missing ones are
    inserted, nothing is ever deleted.
    """

    def __init__(self, collection):
        super().__init__(collection.name)
        self.collection = collection

    def build_operations(self, documents: List[Document]) -> list:
        operations = []
        for document in documents:
            if ID_FIELD in document:
                operations.append(
                    ReplaceOne({ID_FIELD: document[ID_FIELD]}, document, upsert=True)
                )
            else:
                operations.append(InsertOne(document))
        return operations

    async def load_batch(self, documents: List[Document]) -> LoadResult:
        result = LoadResult(collection=self.name, total_attempted=len(documents))
        try:
            await self.collection.bulk_write(self.build_operations(documents), ordered=False)
        except BulkWriteError as e:
            result.absorb(e)
        return result
