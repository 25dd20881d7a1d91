"""JSON snapshot files written by export and read by import."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from bson import json_util

from .exceptions import ArtifactError

logger = logging.getLogger(__name__)

INDEX_SUFFIX = "_indexes"

PathLike = Union[str, Path]


def data_path(output_dir: PathLike, collection: str) -> Path:
    return Path(output_dir) / f"{collection}.json"


def index_path(output_dir: PathLike, collection: str) -> Path:
    return Path(output_dir) / f"{collection}{INDEX_SUFFIX}.json"


def list_collections(output_dir: PathLike) -> List[str]:
    """Collection names that have a data file in the directory, sorted."""
    base = Path(output_dir)
    if not base.is_dir():
        return []
    return sorted(
        p.stem for p in base.glob("*.json")
        if not p.stem.endswith(INDEX_SUFFIX)
    )


def write_documents(path: PathLike, documents: List[Dict[str, Any]]) -> None:
    """Write documents as a relaxed Extended JSON array, replacing any existing file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json_util.dumps(
        documents,
        indent=2,
        json_options=json_util.RELAXED_JSON_OPTIONS,
    )
    path.write_text(text, encoding="utf-8")
    logger.debug(f"Wrote {len(documents)} document(s) to {path}")


def read_documents(path: PathLike) -> List[Dict[str, Any]]:
    """
    Read a JSON array written by ``write_documents``.

    Raises:
        FileNotFoundError: If the file does not exist
        ArtifactError: If the file is not a JSON array of objects
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    try:
        data = json_util.loads(text)
    except (json.JSONDecodeError, ValueError, TypeError) as e:
        raise ArtifactError(f"Malformed JSON in {path}: {e}") from e

    if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
        raise ArtifactError(f"Expected a JSON array of objects in {path}")

    return data
