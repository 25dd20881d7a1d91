"""Best-effort index replication."""

import logging
from typing import Any, Iterable, List, Mapping

from pymongo.errors import PyMongoError

from ..models.index import IndexDefinition

logger = logging.getLogger(__name__)


class IndexReplicator:
    """
    Recreates source index definitions on a target collection.

    The primary key index is never recreated. A failure on one index
    (name or key conflict, unsupported option) is logged and the
    remaining indexes are still attempted.
    """

    def select(self, documents: Iterable[Mapping[str, Any]]) -> List[IndexDefinition]:
        """Parse raw index documents, dropping the primary key index and malformed entries."""
        definitions = []

        for document in documents:
            try:
                definition = IndexDefinition.from_document(document)
            except (ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed index definition: {e}")
                continue
            if not definition.is_primary_key:
                definitions.append(definition)

        return definitions

    async def replicate(
        self,
        target_collection,
        documents: Iterable[Mapping[str, Any]]
    ) -> List[str]:
        """
        Create every non-primary index on the target.

        Args:
            target_collection: Collection to create indexes on
            documents: Raw index documents from the source

        Returns:
            Names of the indexes that were created
        """
        created = []

        for definition in self.select(documents):
            try:
                await target_collection.create_index(
                    definition.keys,
                    name=definition.name,
                    **definition.options,
                )
                created.append(definition.name)
            except PyMongoError as e:
                logger.warning(f"Could not create index {definition.name}: {e}")

        logger.info(f"Replicated {len(created)} index(es) on {target_collection.name}")
        return created
