"""Index definition model."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

PRIMARY_KEY_INDEX = "_id_"

# Bookkeeping fields the server adds to index documents
INTERNAL_INDEX_FIELDS = ("v", "ns")


@dataclass
class IndexDefinition:
    """An index as reported by ``listIndexes``, ready to be recreated."""
    name: str
    keys: List[Tuple[str, Any]]
    options: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_primary_key(self) -> bool:
        return self.name == PRIMARY_KEY_INDEX

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "IndexDefinition":
        """
        Build from a raw index document.

        Args:
            document: Index document from the server or an index artifact

        Returns:
            IndexDefinition with internal fields stripped

        Raises:
            ValueError: If ``name`` or a non-empty ``key`` mapping is missing
        """
        name = document.get("name")
        key = document.get("key")
        if not isinstance(name, str) or not name or not isinstance(key, Mapping) or not key:
            raise ValueError(f"Index document needs a name and a key: {dict(document)!r}")

        options = {
            key: value
            for key, value in document.items()
            if key not in ("key", "name") and key not in INTERNAL_INDEX_FIELDS
        }
        return cls(
            name=name,
            keys=list(key.items()),
            options=options,
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert back to the index document shape."""
        document: Dict[str, Any] = {"key": dict(self.keys), "name": self.name}
        document.update(self.options)
        return document
