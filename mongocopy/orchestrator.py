"""Replication orchestrator - coordinates the per-collection transfer."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pymongo import AsyncMongoClient

from . import artifacts
from .config import load_settings
from .exceptions import ArtifactError, SchemaValidationError
from .extractors.base import BaseExtractor
from .extractors.json_extractor import JsonFileExtractor
from .extractors.mongo_extractor import MongoExtractor
from .loaders.base import BaseLoader
from .loaders.json_loader import JsonExportLoader
from .loaders.mongo_loader import FullReplaceLoader, IncrementalUpsertLoader
from .models.job import JobConfig, JobMode
from .models.result import CollectionResult, CollectionStatus
from .services.index_replicator import IndexReplicator
from .services.progress import ProgressReporter, create_reporter
from .services.query_builder import query_for_job
from .services.schema_probe import SchemaProbe

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _CollectionRun:
    """Mutable counters for the collection being processed."""
    name: str
    started_at: datetime = field(default_factory=_utcnow)
    total: int = 0
    copied: int = 0

    def finish(self, status: CollectionStatus, error: Optional[str] = None) -> CollectionResult:
        return CollectionResult(
            name=self.name,
            status=status,
            copied=self.copied,
            total=self.total,
            error=error,
            started_at=self.started_at,
        )


class ReplicationOrchestrator:
    """
    Orchestrates the replication of a set of collections.

    Handles:
    - Collection selection
    - Transfer filter construction
    - Schema probes
    - Batch streaming through the selected write strategy
    - Index replication
    - Per-collection failure isolation

    Collections are processed one at a time. An error inside one
    collection is recorded on its result and the run moves on; only
    errors outside the per-collection boundary propagate.
    """

    def __init__(
        self,
        config: JobConfig,
        source_db=None,
        target_db=None,
        progress: Optional[ProgressReporter] = None,
        schema_probe: Optional[SchemaProbe] = None,
        index_replicator: Optional[IndexReplicator] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Validated job configuration
            source_db: Source database handle (unused in import mode)
            target_db: Target database handle (unused in export mode)
            progress: Progress sink; defaults to one matching ``show_progress``
            schema_probe: Probe used when ``validate_schema`` is set
            index_replicator: Replicator used when ``copy_indexes`` is set
        """
        self.config = config
        self.source_db = source_db
        self.target_db = target_db
        self.progress = progress or create_reporter(config.show_progress)
        self.schema_probe = schema_probe or SchemaProbe()
        self.index_replicator = index_replicator or IndexReplicator()

        self.query: Dict[str, Any] = query_for_job(config)
        self._create_loader = self._select_loader_factory()
        self._completed_status = self._select_completed_status()

    def _select_loader_factory(self) -> Callable[[str], BaseLoader]:
        """Choose the write strategy once for the whole run."""
        if self.config.mode == JobMode.EXPORT:
            return lambda name: JsonExportLoader(name, self.config.output_dir)

        strategy = IncrementalUpsertLoader if self.config.incremental else FullReplaceLoader
        return lambda name: strategy(self.target_db[name])

    def _select_completed_status(self) -> CollectionStatus:
        if self.config.mode == JobMode.EXPORT:
            return CollectionStatus.EXPORTED
        if self.config.mode == JobMode.IMPORT:
            return CollectionStatus.IMPORTED
        if self.config.incremental:
            return CollectionStatus.INCREMENTAL_COPIED
        return CollectionStatus.COPIED

    def _create_extractor(self, name: str) -> BaseExtractor:
        if self.config.mode == JobMode.IMPORT:
            return JsonFileExtractor(name, self.config.output_dir)
        return MongoExtractor(self.source_db[name])

    async def select_collections(self) -> List[str]:
        """
        Resolve the ordered list of collections to process.

        Returns:
            Source collections in listing order, narrowed to the requested
            ones when any were requested. In import mode requested names
            are kept even without an artifact so they report
            ``no-source-file``.
        """
        requested = list(self.config.collections)

        if self.config.mode == JobMode.IMPORT:
            return requested or await asyncio.to_thread(artifacts.list_collections, self.config.output_dir)

        available = await self.source_db.list_collection_names()
        if not requested:
            return list(available)

        missing = [name for name in requested if name not in available]
        if missing:
            logger.warning(f"Requested collection(s) not found on source: {', '.join(missing)}")

        return [name for name in available if name in requested]

    async def run(self) -> List[CollectionResult]:
        """
        Replicate every selected collection.

        Returns:
            One result per processed collection, in processing order
        """
        if self.config.mode == JobMode.EXPORT:
            Path(self.config.output_dir).mkdir(parents=True, exist_ok=True)

        names = await self.select_collections()
        logger.info(
            f"=== {self.config.mode.value.upper()}: {len(names)} collection(s) "
            f"from {self.config.db_name}{' (dry-run)' if self.config.dry_run else ''} ==="
        )

        results: List[CollectionResult] = []
        for name in names:
            results.append(await self.replicate_collection(name))

        logger.info("=== REPLICATION COMPLETED ===")
        return results

    async def replicate_collection(self, name: str) -> CollectionResult:
        """Process one collection, converting any error into a failed result."""
        run = _CollectionRun(name=name)
        logger.info(f"Processing {name}")

        try:
            result = await self._process(run)
        except Exception as e:
            logger.error(f"Replication failed for {name}: {e}")
            result = run.finish(CollectionStatus.FAILED, error=str(e))
        finally:
            self.progress.stop()

        logger.info(result.summary_line())
        return result

    async def _process(self, run: _CollectionRun) -> CollectionResult:
        source = self._create_extractor(run.name)

        unavailable = await source.precheck()
        if unavailable is not None:
            return run.finish(unavailable)

        run.total = await source.count(self.query)
        if run.total == 0:
            if self.config.incremental:
                return run.finish(CollectionStatus.NO_NEW_DOCS)
            return run.finish(CollectionStatus.EMPTY)

        if self.config.validate_schema and not self.config.dry_run and self.config.mode != JobMode.EXPORT:
            try:
                await self.schema_probe.probe(source, self.target_db[run.name], self.query)
            except SchemaValidationError as e:
                logger.warning(f"Schema validation failed for {run.name}: {e}")
                return run.finish(CollectionStatus.SCHEMA_VALIDATION_FAILED, error=str(e))

        if self.config.dry_run:
            return run.finish(CollectionStatus.DRY_RUN)

        loader = await self._transfer(source, run)

        if self.config.copy_indexes:
            await self._replicate_indexes(source, loader)

        return run.finish(self._completed_status)

    async def _transfer(self, source: BaseExtractor, run: _CollectionRun) -> BaseLoader:
        """Stream batches from the source through the write strategy."""
        loader = self._create_loader(run.name)
        self.progress.start(run.total, run.name)

        await loader.prepare()
        batches = source.stream(self.query, self.config.batch_size)
        try:
            async for batch in batches:
                result = await loader.load_batch(batch)
                run.copied += result.total_attempted
                self.progress.advance(run.copied)
        finally:
            # Releases the source cursor when a write fails mid-stream
            await batches.aclose()
        await loader.finalize()

        return loader

    async def _replicate_indexes(self, source: BaseExtractor, loader: BaseLoader) -> None:
        try:
            indexes = await source.list_indexes()
        except ArtifactError as e:
            logger.warning(f"Skipping indexes for {source.name}: {e}")
            return

        if isinstance(loader, JsonExportLoader):
            await loader.write_indexes(indexes)
        else:
            await self.index_replicator.replicate(self.target_db[source.name], indexes)


async def _close_clients(clients: list) -> None:
    for client in clients:
        try:
            await client.close()
        except Exception as e:
            logger.warning(f"Error closing connection: {e}")


async def replicate(
    config: JobConfig,
    progress: Optional[ProgressReporter] = None,
    client_factory: Callable[[str], Any] = AsyncMongoClient
) -> List[CollectionResult]:
    """
    Connect to the endpoints a job needs and run it.

    Args:
        config: Job configuration; validated here before connecting
        progress: Progress sink; defaults to one matching ``show_progress``
        client_factory: Builds a client from a URI

    Returns:
        One CollectionResult per processed collection

    Raises:
        ConfigError: If the configuration is invalid
        PyMongoError: If an endpoint cannot be reached
    """
    config.validate()
    clients = []

    try:
        source_db = target_db = None

        if config.needs_source:
            source_client = client_factory(config.source_uri)
            clients.append(source_client)
            await source_client.admin.command("ping")
            source_db = source_client[config.db_name]

        if config.needs_target:
            target_client = client_factory(config.target_uri)
            clients.append(target_client)
            await target_client.admin.command("ping")
            target_db = target_client[config.db_name]

        orchestrator = ReplicationOrchestrator(config, source_db, target_db, progress)
        return await orchestrator.run()

    finally:
        await _close_clients(clients)


def copy_collections(
    client_factory: Callable[[str], Any] = AsyncMongoClient,
    **options: Any
) -> List[CollectionResult]:
    """
    Run a replication job synchronously.

    ``options`` are ``JobConfig`` fields. Connection options missing from
    them are taken from the environment (``SOURCE_DB_URI``,
    ``TARGET_DB_URI``, ``DB_NAME``, ``BATCH_SIZE``).

    Example:
        copy_collections(collections=["users"], incremental=True,
                         since=datetime(2024, 1, 1), timestamp_field="updatedAt")

    Raises:
        ConfigError: If an option is unknown or the job is invalid
        PyMongoError: If an endpoint cannot be reached
    """
    settings = load_settings()
    data: Dict[str, Any] = {
        "source_uri": settings.source_uri,
        "target_uri": settings.target_uri,
        "db_name": settings.db_name,
        "batch_size": settings.batch_size,
    }
    data.update(options)

    config = JobConfig.from_dict(data)
    return asyncio.run(replicate(config, client_factory=client_factory))
