"""Tests for SyncResult and SyncProgress."""

from issue_mirror.schemas import SyncStrategy
from issue_mirror.sync import IssueSyncError, SyncProgress, SyncResult


class TestSyncResult:
    def test_defaults(self):
        result = SyncResult()

        assert result.success
        assert result.error_count == 0
        assert not result.cancelled

    def test_error_count(self):
        result = SyncResult(errors=[ValueError("a"), IssueSyncError("b", 3)])

        assert result.error_count == 2

    def test_to_dict(self):
        result = SyncResult(
            success=False,
            synced_count=4,
            skipped_count=1,
            errors=[IssueSyncError("Issue #3: boom", 3), RuntimeError("network")],
            duration=1250,
            strategy=SyncStrategy.INCREMENTAL,
            has_more=True,
        )

        data = result.to_dict()

        assert data["success"] is False
        assert data["strategy"] == "incremental"
        assert data["synced_count"] == 4
        assert data["error_count"] == 2
        assert data["errors"][0] == {
            "issue_number": 3,
            "error": "Issue #3: boom",
            "error_type": "IssueSyncError",
        }
        assert data["errors"][1]["issue_number"] is None
        assert data["duration_ms"] == 1250
        assert data["has_more"] is True


class TestSyncProgress:
    def test_percent_before_listing(self):
        assert SyncProgress(total=0, current=0, message="Fetching").progress_percent == 0.0

    def test_percent(self):
        assert SyncProgress(total=4, current=1, message="x").progress_percent == 25.0

    def test_percent_capped(self):
        assert SyncProgress(total=2, current=3, message="x").progress_percent == 100.0
