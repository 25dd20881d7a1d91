"""Tests for transfer filter construction."""

from datetime import datetime

from mongocopy.models.job import JobConfig
from mongocopy.services.query_builder import build_query, query_for_job

from fakes import matches

SINCE = datetime(2024, 1, 1)


class TestBuildQuery:
    """Filter shapes for full and incremental transfers."""

    def test_full_copy_matches_everything(self):
        assert build_query(False, "_updatedAt", SINCE) == {}

    def test_incremental_without_since_matches_everything(self):
        """A missing lower bound degrades to a full copy, not an error."""
        assert build_query(True, "_updatedAt", None) == {}

    def test_incremental_window(self):
        assert build_query(True, "updatedAt", SINCE) == {"updatedAt": {"$gte": SINCE}}

    def test_documents_without_field_never_match_by_default(self):
        query = build_query(True, "updatedAt", SINCE)
        assert not matches({"_id": 1}, query)
        assert matches({"_id": 2, "updatedAt": SINCE}, query)
        assert not matches({"_id": 3, "updatedAt": datetime(2023, 12, 31)}, query)

    def test_include_untimestamped_widens_the_window(self):
        query = build_query(True, "updatedAt", SINCE, include_untimestamped=True)
        assert query == {
            "$or": [
                {"updatedAt": {"$gte": SINCE}},
                {"updatedAt": {"$exists": False}},
            ]
        }
        assert matches({"_id": 1}, query)
        assert not matches({"_id": 3, "updatedAt": datetime(2023, 12, 31)}, query)

    def test_query_for_job_uses_config_fields(self):
        config = JobConfig(
            db_name="app",
            source_uri="mongodb://src",
            target_uri="mongodb://dst",
            incremental=True,
            timestamp_field="modified",
            since=SINCE,
        )
        assert query_for_job(config) == {"modified": {"$gte": SINCE}}
