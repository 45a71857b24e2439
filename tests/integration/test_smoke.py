"""
End-to-end smoke test of the `paygen run` command.

Uses the local sink, the in-memory partition store and the synthetic
reference pool, so it needs no external service. It is still gated with the
integration suite because it generates and encodes every table.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import json
import os

import pytest
from typer.testing import CliRunner

from paygen.main import app

ROWS = 50
THREADS = 2
EXPECTED_UPLOADS = 6 * 2 * THREADS

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1",
)

runner = CliRunner()


def _invoke(tmp_path, *extra):
    return runner.invoke(
        app,
        [
            "run",
            "--rows",
            str(ROWS),
            "--threads",
            str(THREADS),
            "--job-index",
            "4",
            "--local-output",
            str(tmp_path),
            "--memory-store",
            "--synthetic-pool",
            *extra,
        ],
    )


def _report(output: str):
    # Log lines may share the captured stream; the report is the indented block.
    start = output.index("\n{") + 1 if not output.startswith("{") else 0
    return json.loads(output[start : output.rindex("}") + 1])


def test_run_command_writes_parquet(tmp_path):
    result = _invoke(tmp_path, "--json")
    assert result.exit_code == 0, result.output

    report = _report(result.output)
    assert report["completed"] is True
    assert report["rows"] == ROWS * THREADS
    assert report["extra"]["uploads_succeeded"] == EXPECTED_UPLOADS

    written = sorted(tmp_path.rglob("*.parquet"))
    assert len(written) == EXPECTED_UPLOADS
    assert not list(tmp_path.rglob("*.partial"))


def test_run_command_renders_table(tmp_path):
    result = _invoke(tmp_path)
    assert result.exit_code == 0, result.output
    assert "Total" in result.output
