"""Replication execution endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import PyMongoError

from ..models import (
    CollectionResultResponse,
    ReplicationRequest,
    ReplicationResponse,
)
from ...config import Settings, load_settings
from ...exceptions import ConfigError
from ...models.job import JobConfig
from ...orchestrator import replicate

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings() -> Settings:
    return load_settings()


@router.post("", response_model=ReplicationResponse)
async def run_replication(
    request: ReplicationRequest,
    settings: Settings = Depends(get_settings)
):
    """Run a replication job and return one result per collection."""
    config = JobConfig.from_dict(request.to_job_dict(settings))

    try:
        results = await replicate(config)
    except ConfigError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PyMongoError as e:
        logger.error(f"Replication aborted: {e}")
        raise HTTPException(status_code=502, detail=f"Could not reach endpoint: {e}")

    return ReplicationResponse(
        results=[CollectionResultResponse.from_result(r) for r in results],
        total_copied=sum(r.copied for r in results),
        failed=[r.name for r in results if r.is_failure],
    )
