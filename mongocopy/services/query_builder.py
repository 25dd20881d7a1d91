"""Source-side filter construction."""

from datetime import datetime
from typing import Any, Dict, Optional

from ..models.job import JobConfig


def build_query(
    incremental: bool,
    timestamp_field: str,
    since: Optional[datetime],
    include_untimestamped: bool = False
) -> Dict[str, Any]:
    """
    Build the filter that selects documents for a transfer.

    Args:
        incremental: Whether the run is an incremental sync
        timestamp_field: Field holding the document's last-update time
        since: Lower bound (inclusive); None copies everything
        include_untimestamped: Also match documents that lack the field

    Returns:
        A MongoDB filter document; ``{}`` matches every document
    """
    if not incremental or since is None:
        return {}

    window = {timestamp_field: {"$gte": since}}
    if include_untimestamped:
        return {"$or": [window, {timestamp_field: {"$exists": False}}]}
    return window


def query_for_job(config: JobConfig) -> Dict[str, Any]:
    """Build the filter for a job configuration."""
    return build_query(
        incremental=config.incremental,
        timestamp_field=config.timestamp_field,
        since=config.since,
        include_untimestamped=config.include_untimestamped,
    )
