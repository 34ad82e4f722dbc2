"""Shared test fixtures for the fsk test suite.

Design:
- db_root: isolated note database in a temp directory (FSK_DB_ROOT points at it)
- storage: Storage bound to db_root
- runner / cli_invoke: CliRunner with the database and editor pinned
"""

from pathlib import Path

import pytest
from click.testing import CliRunner

from fsk.cli import cli
from fsk.storage import Storage


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def db_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Note database root inside tmp_path. Not created until a test needs it."""
    root = tmp_path / "db"
    monkeypatch.setenv("FSK_DB_ROOT", str(root))
    monkeypatch.delenv("EDITOR", raising=False)
    return root


@pytest.fixture
def storage(db_root: Path) -> Storage:
    return Storage(db_root)


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def cli_invoke(runner: CliRunner, db_root: Path):
    """Helper for invoking the CLI against the temp database.

    Usage:
        def test_list(cli_invoke):
            result = cli_invoke(["list"])
            assert result.exit_code == 0
    """

    def _invoke(args: list[str], env: dict[str, str] | None = None, catch_exceptions: bool = False):
        return runner.invoke(
            cli,
            args,
            catch_exceptions=catch_exceptions,
            env={"FSK_DB_ROOT": str(db_root), **(env or {})},
        )

    return _invoke


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def create_note(root: Path, title: str, content: str = "") -> Path:
    """Write a note file directly, bypassing the editor.

    Usage in tests:
        from conftest import create_note
        create_note(db_root, "linux/kernel", "scheduler notes")
    """
    path = root.joinpath(*title.split("/")).with_name(title.split("/")[-1] + ".md")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content.encode("utf-8"))
    return path
