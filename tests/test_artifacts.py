"""Tests for JSON export and import."""

import asyncio
from datetime import datetime

import pytest
from bson import ObjectId

from mongocopy import artifacts
from mongocopy.exceptions import ArtifactError
from mongocopy.models.job import JobConfig
from mongocopy.models.result import CollectionStatus
from mongocopy.orchestrator import ReplicationOrchestrator

from fakes import FakeCollection, FakeDatabase, RecordingReporter

OID = ObjectId("65a1b2c3d4e5f60718293a4b")


def run_job(source_db=None, target_db=None, **options):
    config = JobConfig(db_name="app", show_progress=False, **options)
    orchestrator = ReplicationOrchestrator(config, source_db, target_db, RecordingReporter())
    return asyncio.run(orchestrator.run())


class TestArtifactFiles:
    """Reading and writing snapshot files."""

    def test_bson_types_survive_round_trip(self, tmp_path):
        documents = [{"_id": OID, "at": datetime(2024, 5, 1, 12, 30), "tags": ["a"]}]
        path = tmp_path / "users.json"

        artifacts.write_documents(path, documents)
        loaded = artifacts.read_documents(path)

        assert loaded[0]["_id"] == OID
        assert loaded[0]["at"].replace(tzinfo=None) == datetime(2024, 5, 1, 12, 30)

    def test_malformed_file_raises(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text("[{not json", encoding="utf-8")

        with pytest.raises(ArtifactError):
            artifacts.read_documents(path)

    def test_non_array_raises(self, tmp_path):
        path = tmp_path / "users.json"
        path.write_text('{"_id": 1}', encoding="utf-8")

        with pytest.raises(ArtifactError):
            artifacts.read_documents(path)

    def test_list_collections_skips_index_files(self, tmp_path):
        for name in ("users.json", "users_indexes.json", "orders.json", "notes.txt"):
            (tmp_path / name).write_text("[]", encoding="utf-8")

        assert artifacts.list_collections(tmp_path) == ["orders", "users"]

    def test_list_collections_missing_directory(self, tmp_path):
        assert artifacts.list_collections(tmp_path / "nope") == []


class TestExport:

    def test_export_writes_matched_documents_and_indexes(self, tmp_path):
        out = tmp_path / "backup"
        source = FakeDatabase(collections=[FakeCollection(
            "users",
            [
                {"_id": 1, "_updatedAt": datetime(2024, 2, 1)},
                {"_id": 2, "_updatedAt": datetime(2023, 1, 1)},
            ],
            indexes=[{"v": 2, "key": {"email": 1}, "name": "email_1"}],
        )])

        results = run_job(
            source,
            source_uri="mongodb://src",
            export_mode=True,
            output_dir=str(out),
            incremental=True,
            since=datetime(2024, 1, 1),
            copy_indexes=True,
            validate_schema=True,
            batch_size=1,
        )

        assert (results[0].status, results[0].copied, results[0].total) == (CollectionStatus.EXPORTED, 1, 1)
        assert [d["_id"] for d in artifacts.read_documents(out / "users.json")] == [1]
        assert [i["name"] for i in artifacts.read_documents(out / "users_indexes.json")] == ["_id_", "email_1"]


class TestImport:

    def test_import_full_replace(self, tmp_path):
        artifacts.write_documents(tmp_path / "users.json", [{"_id": 1}, {"_id": 2}, {"_id": 3}])
        target = FakeDatabase(collections=[FakeCollection("users", [{"_id": "stale"}])])

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          output_dir=str(tmp_path), batch_size=2)

        assert (results[0].status, results[0].copied, results[0].total) == (CollectionStatus.IMPORTED, 3, 3)
        assert target["users"].snapshot() == [{"_id": 1}, {"_id": 2}, {"_id": 3}]

    def test_incremental_import_upserts(self, tmp_path):
        artifacts.write_documents(tmp_path / "users.json", [{"_id": 1, "v": "new"}])
        target = FakeDatabase(collections=[FakeCollection("users", [{"_id": 1, "v": "old"}, {"_id": 2}])])

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          incremental=True, output_dir=str(tmp_path))

        assert results[0].status == CollectionStatus.IMPORTED
        assert target["users"].snapshot() == [{"_id": 1, "v": "new"}, {"_id": 2}]

    def test_missing_and_empty_files(self, tmp_path):
        artifacts.write_documents(tmp_path / "empty.json", [])
        target = FakeDatabase()

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          output_dir=str(tmp_path), collections=("absent", "empty"))

        assert [(r.name, r.status) for r in results] == [
            ("absent", CollectionStatus.NO_SOURCE_FILE),
            ("empty", CollectionStatus.SOURCE_EMPTY),
        ]
        assert target["absent"].calls == []
        assert target["empty"].calls == []

    def test_malformed_file_fails_only_that_collection(self, tmp_path):
        (tmp_path / "bad.json").write_text("{oops", encoding="utf-8")
        artifacts.write_documents(tmp_path / "good.json", [{"_id": 1}])
        target = FakeDatabase()

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          output_dir=str(tmp_path))

        assert [(r.name, r.status) for r in results] == [
            ("bad", CollectionStatus.FAILED),
            ("good", CollectionStatus.IMPORTED),
        ]
        assert "Malformed JSON" in results[0].error

    def test_import_replays_indexes(self, tmp_path):
        artifacts.write_documents(tmp_path / "users.json", [{"_id": 1}])
        artifacts.write_documents(tmp_path / "users_indexes.json", [
            {"v": 2, "key": {"_id": 1}, "name": "_id_"},
            {"v": 2, "key": {"email": 1}, "name": "email_1", "unique": True},
        ])
        target = FakeDatabase()

        run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                copy_indexes=True, output_dir=str(tmp_path))

        assert [i["name"] for i in target["users"].indexes] == ["_id_", "email_1"]

    def test_import_probe_uses_artifact_sample(self, tmp_path):
        artifacts.write_documents(tmp_path / "users.json", [{"_id": 1}])
        target = FakeDatabase(collections=[FakeCollection("users", reject_inserts="bad schema")])

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          validate_schema=True, output_dir=str(tmp_path))

        assert results[0].status == CollectionStatus.SCHEMA_VALIDATION_FAILED

    def test_malformed_index_entry_does_not_fail_import(self, tmp_path):
        artifacts.write_documents(tmp_path / "users.json", [{"_id": 1}])
        artifacts.write_documents(tmp_path / "users_indexes.json", [
            {"v": 2, "key": {"email": 1}},
            {"v": 2, "key": {"name": 1}, "name": "name_1"},
        ])
        target = FakeDatabase()

        results = run_job(target_db=target, target_uri="mongodb://dst", import_mode=True,
                          copy_indexes=True, output_dir=str(tmp_path))

        assert results[0].status == CollectionStatus.IMPORTED
        assert [i["name"] for i in target["users"].indexes] == ["_id_", "name_1"]
