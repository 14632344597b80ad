"""Tests for generation requests and their filters."""

import pytest

from codectx.errors import UserError
from codectx.tracking.generation import (
    DEFAULT_STATUS_FILTER,
    parse_files_filter,
    parse_status_filter,
    request_generation,
)
from codectx.tracking.types import FileEntry, FileStatus, Index


@pytest.fixture
def index():
    index = Index()
    for path, status in [
        ("src/a.ts", FileStatus.STALE),
        ("src/b.ts", FileStatus.MISSING),
        ("src/c.ts", FileStatus.CURRENT),
        ("src/d.ts", FileStatus.PENDING_GENERATION),
    ]:
        index.upsert(path, FileEntry(path=path, hash="h", artifact_path="", status=status, type="service"))
    return index


class TestParseStatusFilter:
    """Tests for parse_status_filter()."""

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_blank_is_default(self, raw):
        assert parse_status_filter(raw) == set(DEFAULT_STATUS_FILTER)

    def test_names(self):
        assert parse_status_filter("stale, CURRENT") == {FileStatus.STALE, FileStatus.CURRENT}

    @pytest.mark.parametrize("raw", ["pending", "pendingGeneration", "PendingGeneration"])
    def test_pending_aliases(self, raw):
        assert parse_status_filter(raw) == {FileStatus.PENDING_GENERATION}

    def test_unknown_name(self):
        with pytest.raises(UserError, match="Unknown status filter: fresh"):
            parse_status_filter("stale,fresh")

    def test_only_separators(self):
        with pytest.raises(UserError, match="No valid statuses"):
            parse_status_filter(",,")


class TestParseFilesFilter:
    """Tests for parse_files_filter()."""

    def test_normalizes_and_dedupes(self):
        assert parse_files_filter("./src/a.ts, src\\b.ts,src/a.ts") == ["src/a.ts", "src/b.ts"]

    @pytest.mark.parametrize("raw", [None, ""])
    def test_blank(self, raw):
        assert parse_files_filter(raw) == []


class TestRequestGeneration:
    """Tests for request_generation()."""

    def test_default_selects_stale_and_missing(self, index):
        worklist = request_generation(index)
        assert [r.path for r in worklist] == ["src/a.ts", "src/b.ts"]
        assert [r.previous_status for r in worklist] == [FileStatus.STALE, FileStatus.MISSING]
        assert index.files["src/a.ts"].status == FileStatus.PENDING_GENERATION
        assert index.files["src/b.ts"].status == FileStatus.PENDING_GENERATION
        assert index.files["src/c.ts"].status == FileStatus.CURRENT

    def test_fills_in_artifact_path(self, index):
        worklist = request_generation(index, files=["src/b.ts"])
        assert worklist[0].artifact_path == ".ctx/skeletons/src/b.skeleton.ts"
        assert index.files["src/b.ts"].artifact_path == ".ctx/skeletons/src/b.skeleton.ts"

    def test_current_can_be_requested_explicitly(self, index):
        worklist = request_generation(index, statuses={FileStatus.CURRENT})
        assert [r.path for r in worklist] == ["src/c.ts"]
        assert index.stats.current == 0

    def test_files_filter(self, index):
        worklist = request_generation(index, files=["src/b.ts", "src/a.ts"])
        assert [r.path for r in worklist] == ["src/a.ts", "src/b.ts"]

    def test_untracked_file(self, index):
        with pytest.raises(UserError, match="not tracked"):
            request_generation(index, files=["src/zzz.ts"])
        assert index.files["src/a.ts"].status == FileStatus.STALE

    def test_file_with_ineligible_status(self, index):
        with pytest.raises(UserError, match="does not match filter statuses"):
            request_generation(index, files=["src/c.ts"])

    def test_nothing_selected(self):
        empty = Index()
        with pytest.raises(UserError, match="No files match"):
            request_generation(empty)

    def test_to_dict(self, index):
        request = request_generation(index, files=["src/a.ts"])[0]
        assert request.to_dict() == {
            "path": "src/a.ts",
            "previous_status": "stale",
            "type": "service",
            "artifact_path": ".ctx/skeletons/src/a.skeleton.ts",
        }
