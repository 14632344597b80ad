"""Tests for ctx CLI commands through Click's test runner."""

import json

import pytest

from codectx.cli.main import cli
from codectx.errors import DataError, UserError
from codectx.tracking.workspace import Workspace


def invoke(cli_runner, *args):
    return cli_runner.invoke(cli, [str(a) for a in args])


def invoke_json(cli_runner, *args):
    result = invoke(cli_runner, *args, "--json")
    return result, json.loads(result.stdout)


@pytest.fixture
def project(sample_project, cli_runner):
    """Sample project after 'ctx init'."""
    result = invoke(cli_runner, "init", "--root", sample_project)
    assert result.exit_code == 0, result.output
    return sample_project


def write_artifact(root, rel_path, content="skeleton\n"):
    path = root.joinpath(*rel_path.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestInitCommand:
    """Tests for 'ctx init'."""

    def test_text_output(self, cli_runner, sample_project):
        result = invoke(cli_runner, "init", "--root", sample_project)
        assert result.exit_code == 0
        assert "Initialized .ctx/" in result.output
        assert "Updated .gitignore" in result.output
        assert "Found 5 files (all marked missing)" in result.output

    def test_json_output(self, cli_runner, sample_project):
        result, payload = invoke_json(cli_runner, "init", "--root", sample_project)
        assert result.exit_code == 0
        assert payload["status"] == "success"
        assert payload["data"]["files"] == 5
        assert payload["data"]["migrated"] is False

    def test_second_init_fails(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "init", "--root", project)
        assert result.exit_code == 1
        assert payload["status"] == "error"
        assert "Already initialized" in payload["errors"][0]

    def test_text_mode_error_propagates(self, cli_runner, project):
        result = invoke(cli_runner, "init", "--root", project)
        assert isinstance(result.exception, UserError)


class TestStatusCommand:
    """Tests for 'ctx status'."""

    def test_table(self, cli_runner, project):
        result = invoke(cli_runner, "status", "--root", project)
        assert result.exit_code == 0
        assert "Code Context Status" in result.output
        assert "Last sync:" in result.output
        assert "Prompt version: 2.1" in result.output

    def test_verbose_lists_missing_files(self, cli_runner, project):
        result = invoke(cli_runner, "status", "--root", project, "-v")
        assert "Missing:\n  - src/app.go" in result.output

    def test_json(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "status", "--root", project, "--verbose")
        data = payload["data"]
        assert data["stats"] == {
            "totalFiles": 5, "current": 0, "stale": 0, "missing": 5, "pendingGeneration": 0,
        }
        assert data["files"]["missing"][0] == "src/app.go"
        assert data["files"]["stale"] == []
        assert data["last_sync"].endswith("Z")

    def test_not_initialized(self, cli_runner, sample_project):
        result, payload = invoke_json(cli_runner, "status", "--root", sample_project)
        assert result.exit_code == 1
        assert "ctx init" in payload["errors"][0]

    def test_corrupt_index(self, cli_runner, project):
        (project / ".ctx" / "index.json").write_text("[]")
        result, payload = invoke_json(cli_runner, "status", "--root", project)
        assert result.exit_code == 4


class TestSyncCommand:
    """Tests for 'ctx sync'."""

    def test_no_changes(self, cli_runner, project):
        result = invoke(cli_runner, "sync", "--root", project, "--full")
        assert result.exit_code == 0
        assert "No changes detected" in result.output

    def test_reports_changes(self, cli_runner, project, write_file):
        write_file(project, "src/orders/order.service.ts", "export class OrderService {}\n")
        (project / "src" / "app.go").write_text("package changed\n")
        (project / "src" / "util.py").unlink()

        result, payload = invoke_json(cli_runner, "sync", "--root", project, "--full")
        data = payload["data"]
        assert result.exit_code == 0
        assert data["strategy"] == "full"
        assert data["added"] == ["src/orders/order.service.ts"]
        assert data["modified"] == ["src/app.go"]
        assert data["deleted"] == ["src/util.py"]
        assert data["stats"]["totalFiles"] == 5

    def test_verbose_lists_paths(self, cli_runner, project, write_file):
        write_file(project, "src/new.go", "package main\n")
        result = invoke(cli_runner, "sync", "--root", project, "--full", "-v")
        assert "Changes detected:" in result.output
        assert "Added:\n  - src/new.go" in result.output


class TestGenerateCommand:
    """Tests for 'ctx generate'."""

    def test_marks_files_pending(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "generate", "--root", project)
        assert result.exit_code == 0
        files = payload["data"]["files"]
        assert [f["path"] for f in files][0] == "src/app.go"
        assert files[0]["artifact_path"] == ".ctx/skeletons/src/app.skeleton.go"
        assert files[0]["previous_status"] == "missing"
        assert payload["data"]["stats"]["pendingGeneration"] == 5

    def test_text_output(self, cli_runner, project):
        result = invoke(cli_runner, "generate", "--root", project, "--files", "src/app.go")
        assert result.exit_code == 0
        assert "Next steps:" in result.output
        assert "ctx validate --fix" in result.output

    def test_unknown_filter(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "generate", "--root", project, "--filter", "fresh")
        assert result.exit_code == 1
        assert "Unknown status filter" in payload["errors"][0]

    def test_untracked_file(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "generate", "--root", project, "--files", "nope.go")
        assert result.exit_code == 1
        assert "not tracked" in payload["errors"][0]

    def test_nothing_to_do(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "generate", "--root", project, "--filter", "current")
        assert result.exit_code == 1
        assert "No files match" in payload["errors"][0]


class TestValidateCommand:
    """Tests for 'ctx validate'."""

    def test_clean(self, cli_runner, project):
        result = invoke(cli_runner, "validate", "--root", project)
        assert result.exit_code == 0
        assert "No issues found." in result.output

    def test_full_generation_cycle(self, cli_runner, project):
        invoke(cli_runner, "generate", "--root", project, "--files", "src/app.go")
        write_artifact(project, ".ctx/skeletons/src/app.skeleton.go")

        result, payload = invoke_json(cli_runner, "validate", "--root", project, "--fix")
        assert result.exit_code == 0
        assert payload["data"]["saved"] is True
        assert payload["data"]["stats"]["current"] == 1

        result, payload = invoke_json(cli_runner, "validate", "--root", project, "--fix")
        assert payload["data"]["issues"] == []
        assert payload["data"]["saved"] is False

    def test_issues_are_listed(self, cli_runner, project):
        (project / "src" / "util.py").unlink()
        result = invoke(cli_runner, "validate", "--root", project)
        assert result.exit_code == 0
        assert "[issue] src/util.py: source missing" in result.output

    def test_fix_reports_summary(self, cli_runner, project):
        (project / "src" / "util.py").unlink()
        result = invoke(cli_runner, "validate", "--root", project, "--fix")
        assert "[fixed] src/util.py: source missing (removed from index)" in result.output
        assert "1 file(s) removed from index" in result.output

    def test_strict_fails_after_reporting(self, cli_runner, project):
        (project / "src" / "util.py").unlink()
        result = invoke(cli_runner, "validate", "--root", project, "--strict", "--json")
        assert isinstance(result.exception, DataError)
        payload = json.loads(result.stdout)
        assert payload["status"] == "error"
        assert payload["data"]["issues"][0]["path"] == "src/util.py"

    def test_strict_passes_when_fixed(self, cli_runner, project):
        (project / "src" / "util.py").unlink()
        result = invoke(cli_runner, "validate", "--root", project, "--fix", "--strict")
        assert result.exit_code == 0


class TestCleanCommand:
    """Tests for 'ctx clean'."""

    def test_nothing_to_clean(self, cli_runner, project):
        result = invoke(cli_runner, "clean", "--root", project)
        assert result.exit_code == 0
        assert "No orphaned skeletons found" in result.output

    def test_removes_orphans(self, cli_runner, project):
        write_artifact(project, ".ctx/skeletons/src/app.skeleton.go")
        write_artifact(project, ".ctx/skeletons/old/removed.skeleton.go")

        result, payload = invoke_json(cli_runner, "clean", "--root", project)
        assert payload["data"]["removed_files"] == [".ctx/skeletons/old/removed.skeleton.go"]
        assert payload["data"]["removed_dirs"] == [".ctx/skeletons/old"]
        assert (project / ".ctx" / "skeletons" / "src" / "app.skeleton.go").exists()


class TestRebuildCommand:
    """Tests for 'ctx rebuild'."""

    def test_requires_confirm(self, cli_runner, project):
        result, payload = invoke_json(cli_runner, "rebuild", "--root", project)
        assert result.exit_code == 1
        assert "--confirm" in payload["errors"][0]

    def test_rebuild(self, cli_runner, project):
        write_artifact(project, ".ctx/skeletons/src/app.skeleton.go")
        invoke(cli_runner, "generate", "--root", project)

        result, payload = invoke_json(cli_runner, "rebuild", "--root", project, "--confirm")
        assert result.exit_code == 0
        assert payload["data"]["deleted_skeletons"] == 1
        assert payload["data"]["stats"]["missing"] == 5
        assert Workspace(project).load_index().stats.pending_generation == 0


class TestPipelineCommand:
    """Tests for 'ctx pipeline'."""

    def test_sync_then_generate(self, cli_runner, project, write_file):
        invoke(cli_runner, "generate", "--root", project, "--files", "src/app.go")
        write_artifact(project, ".ctx/skeletons/src/app.skeleton.go")
        invoke(cli_runner, "validate", "--root", project, "--fix")
        (project / "src" / "app.go").write_text("package changed\n")

        result, payload = invoke_json(cli_runner, "pipeline", "--root", project, "--full", "--filter", "stale")
        assert result.exit_code == 0
        assert payload["data"]["sync"]["modified"] == ["src/app.go"]
        assert [f["path"] for f in payload["data"]["files"]] == ["src/app.go"]
        assert payload["data"]["files"][0]["previous_status"] == "stale"
        assert payload["data"]["stats"]["pendingGeneration"] == 1

    def test_text_output(self, cli_runner, project):
        result = invoke(cli_runner, "pipeline", "--root", project, "--full")
        assert result.exit_code == 0
        assert "No changes detected" in result.output
        assert "Next steps:" in result.output
