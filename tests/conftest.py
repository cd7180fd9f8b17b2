"""Shared test fixtures for swagger-to-postman.

Provides reusable fixtures for loading spec fixtures, isolating the working
directory and environment, managing output state, and running the CLI.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pytest

from swagger_to_postman.models import ParsedSpec
from swagger_to_postman.output import OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _plain_output_between_tests(monkeypatch: pytest.MonkeyPatch) -> None:
    """Force plain diagnostics and reset the global OutputManager after every test.

    ``NO_COLOR`` keeps Rich from wrapping long messages, so tests can match
    on full lines. The OutputManager caches sys.stderr at creation time;
    resetting it avoids stale streams once CliRunner restores them. The
    package logger is restored for the same reason after a verbose run.
    """
    logger = logging.getLogger("swagger_to_postman")
    level, handlers = logger.level, list(logger.handlers)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("SWAGGER_TO_POSTMAN_CONFIG", raising=False)
    yield
    reset_output()
    logger.setLevel(level)
    logger.handlers[:] = handlers


# ---------------------------------------------------------------------------
# Raw spec fixtures (plain dicts loaded from JSON files)
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Load raw petstore OpenAPI 3.0 spec dict."""
    with open(FIXTURES_DIR / "petstore_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_swagger2_raw() -> dict[str, Any]:
    """Load raw petstore Swagger 2.0 spec dict."""
    with open(FIXTURES_DIR / "petstore_swagger2.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_spec(petstore_30_raw: dict[str, Any]) -> ParsedSpec:
    """Parsed petstore 3.0 spec."""
    from swagger_to_postman.parser.extractor import extract_spec

    return extract_spec(petstore_30_raw, "3.0.3")


# ---------------------------------------------------------------------------
# Working directory isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test inside tmp_path with a copy of the petstore spec.

    The default output file and any project-local config are then
    resolved relative to tmp_path.

    Returns:
        The tmp_path root directory.
    """
    (tmp_path / "petstore.json").write_text(
        (FIXTURES_DIR / "petstore_3.0.json").read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet output manager for tests that don't care about output."""
    output = OutputManager(quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner.

    Returns a CliRunner instance that captures stdout/stderr and
    provides a consistent interface for invoking Typer apps in tests.
    """
    from typer.testing import CliRunner

    return CliRunner()
