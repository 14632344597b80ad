"""Shared pytest fixtures for codectx tests."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import git
import pytest


# ============================================================================
# Auto-mark tests based on directory
# ============================================================================

def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        test_path = str(item.fspath)

        if '/tests/unit/' in test_path or '\\tests\\unit\\' in test_path:
            item.add_marker(pytest.mark.unit)
        elif '/tests/tracking/' in test_path or '\\tests\\tracking\\' in test_path:
            item.add_marker(pytest.mark.integration)


# ============================================================================
# Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def isolated_state_dir(tmp_path, monkeypatch):
    """Keep interaction logs out of the real ~/.local/state."""
    state_dir = tmp_path / "state"
    monkeypatch.setenv("XDG_STATE_HOME", str(state_dir))
    return state_dir


# ============================================================================
# Interaction Logger Fixtures
# ============================================================================

@pytest.fixture
def mock_interaction_logger():
    """Mock the interaction logger used by command_context."""
    with patch('codectx.cli.core.command_wrapper.interaction_logger') as mock_logger:
        yield mock_logger


# ============================================================================
# File System Fixtures
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


def _write_file(root: Path, rel_path: str, content: str = "") -> Path:
    path = root.joinpath(*rel_path.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def write_file():
    """Write content to root/rel_path, creating parent directories."""
    return _write_file


@pytest.fixture
def sample_project(temp_dir):
    """A small source tree with tracked, excluded and ignored files."""
    root = temp_dir / "project"
    root.mkdir()
    _write_file(root, "src/app.go", "package main\n")
    _write_file(root, "src/users/user.service.ts", "export class UserService {}\n")
    _write_file(root, "src/users/user.controller.ts", "export class UserController {}\n")
    _write_file(root, "src/dto/user.ts", "export interface UserDto {}\n")
    _write_file(root, "src/util.py", "def helper():\n    pass\n")
    _write_file(root, "src/app.test.ts", "test('x', () => {})\n")
    _write_file(root, "node_modules/lib/index.js", "module.exports = {}\n")
    _write_file(root, "README.md", "# sample\n")
    return root


@pytest.fixture
def temp_git_repo(temp_dir):
    """Create a temporary git repository with one committed file."""
    repo_dir = temp_dir / "test_repo"
    repo_dir.mkdir()

    repo = git.Repo.init(repo_dir)
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    _write_file(repo_dir, "main.py", "def hello():\n    print('Hello')\n")
    repo.index.add(["main.py"])
    repo.index.commit("Initial commit")

    yield repo_dir


# ============================================================================
# CLI Runner Fixture
# ============================================================================

@pytest.fixture
def cli_runner():
    """Provide Click's CliRunner for testing CLI commands."""
    from click.testing import CliRunner
    return CliRunner()
