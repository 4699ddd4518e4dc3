"""Shared test fixtures for specir.

Provides the raw petstore document, isolated config directories, output
manager state handling, and a CLI runner. These fixtures are discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specir.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager holds references to sys.stdout/sys.stderr taken at creation
    time. CliRunner swaps those streams per invocation, so a manager left
    over from a previous test would write to closed files.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_path() -> Path:
    """Path to the petstore fixture on disk."""
    return FIXTURES_DIR / "petstore.json"


@pytest.fixture
def petstore(petstore_path: Path) -> dict[str, Any]:
    """Raw petstore document as a fresh dict (safe to mutate)."""
    with open(petstore_path, encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def minimal_doc() -> dict[str, Any]:
    """Smallest document that validates cleanly."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Minimal", "version": "1.0.0"},
        "paths": {},
        "components": {"schemas": {}},
    }


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points XDG_CONFIG_HOME and XDG_DATA_HOME into tmp_path, forces the XDG
    layout regardless of platform, clears SPECIR_* variables and changes the
    working directory to tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("specir.config._is_xdg_platform", lambda: True)

    for var in ["SPECIR_STRICT", "SPECIR_STRUCTURE", "SPECIR_RECOVERY"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN, quiet OutputManager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON OutputManager for tests that parse stdout."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
