"""Pre-flight write compatibility check."""

import logging
from typing import Any, Dict, Optional

from ..exceptions import SchemaValidationError

logger = logging.getLogger(__name__)

PROBE_MARKER_FIELD = "_validationTest"


class SchemaProbe:
    """
    Checks that the target accepts a source document before a transfer.

    A sample matching the transfer filter is written to the target with a
    marker field and a server-generated ``_id``, then deleted again. Any
    write or delete error fails the probe.
    """

    def __init__(self, marker_field: str = PROBE_MARKER_FIELD):
        self.marker_field = marker_field

    def build_probe_document(self, sample: Dict[str, Any]) -> Dict[str, Any]:
        """Copy the sample without its identity and tag it."""
        document = {k: v for k, v in sample.items() if k != "_id"}
        document[self.marker_field] = True
        return document

    async def probe(self, source_collection, target_collection, query: Dict[str, Any]) -> bool:
        """
        Run the probe for one collection.

        Args:
            source_collection: Collection to sample from
            target_collection: Collection to test-write into
            query: Transfer filter the sample must match

        Returns:
            True if a document was written and removed, False if nothing
            matched and the probe was skipped

        Raises:
            SchemaValidationError: If the target rejected the write or delete
        """
        sample: Optional[Dict[str, Any]] = await source_collection.find_one(query)
        if sample is None:
            logger.debug(f"No sample document for {source_collection.name}, skipping probe")
            return False

        try:
            result = await target_collection.insert_one(self.build_probe_document(sample))
            if result.acknowledged:
                await target_collection.delete_one({"_id": result.inserted_id})
        except Exception as e:
            raise SchemaValidationError(str(e)) from e

        logger.debug(f"Schema probe passed for {target_collection.name}")
        return True
