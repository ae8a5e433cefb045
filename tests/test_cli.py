"""Tests for analyses_report/cli.py"""

import json
from pathlib import Path

import pytest
import requests
from click.testing import CliRunner

from analyses_report import __version__
from analyses_report.cli import cli
from analyses_report.models import REF

URL = "https://ci.example.com/lint/1234.json"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    monkeypatch.delenv("ANALYSES_TIMEOUT", raising=False)


def write_notes(tmp_path: Path, *contents: str) -> list[str]:
    paths = []
    for i, content in enumerate(contents):
        p = tmp_path / f"note-{i}.json"
        p.write_text(content, encoding="utf-8")
        paths.append(str(p))
    return paths


# ---------------------------------------------------------------------------
# group options
# ---------------------------------------------------------------------------

def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

def test_init_writes_template(runner, tmp_path):
    out = tmp_path / "cfg.yaml"
    result = runner.invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 0
    assert out.exists()


def test_init_refuses_to_overwrite(runner, tmp_path):
    out = tmp_path / "cfg.yaml"
    out.write_text("x")
    result = runner.invoke(cli, ["init", "--output", str(out)])
    assert result.exit_code == 1


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

def test_parse_emits_valid_reports(runner, tmp_path):
    notes = write_notes(tmp_path, '{"timestamp":"1"}', "garbage", '{"timestamp":"2","v":3}')
    result = runner.invoke(cli, ["parse", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"timestamp": "1"}]


def test_parse_one_report_per_line(runner, tmp_path):
    notes = write_notes(tmp_path, '{"timestamp":"1"}\n\n{"v":2}\n{"timestamp":"3"}\n')
    result = runner.invoke(cli, ["parse", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"timestamp": "1"}, {"timestamp": "3"}]


def test_parse_reads_stdin(runner):
    result = runner.invoke(cli, ["parse", "-"], input='{"status":"lgtm"}')
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"status": "lgtm"}]


def test_parse_accepted_versions_from_config(runner, tmp_path):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("format:\n  accepted_versions: [3]\n")
    notes = write_notes(tmp_path, '{"timestamp":"1"}', '{"timestamp":"2","v":3}')
    result = runner.invoke(cli, ["--config", str(cfg), "parse", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [{"timestamp": "2", "v": 3}]


def test_bad_config_exits(runner, tmp_path):
    notes = write_notes(tmp_path, "{}")
    result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml"), "parse", *notes])
    assert result.exit_code == 1


# ---------------------------------------------------------------------------
# latest
# ---------------------------------------------------------------------------

def test_latest_selects_most_recent(runner, tmp_path):
    notes = write_notes(tmp_path, '{"timestamp":"100"}', '{"timestamp":"300"}', '{"timestamp":"200"}')
    result = runner.invoke(cli, ["latest", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"timestamp": "300"}


def test_latest_without_valid_reports_is_null(runner, tmp_path):
    notes = write_notes(tmp_path, "garbage")
    result = runner.invoke(cli, ["latest", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) is None


def test_latest_invalid_timestamp_exits(runner, tmp_path):
    notes = write_notes(tmp_path, '{"timestamp":"100"}', '{"timestamp":"abc"}')
    result = runner.invoke(cli, ["latest", *notes])
    assert result.exit_code == 1


def test_latest_writes_output_file(runner, tmp_path):
    notes = write_notes(tmp_path, '{"timestamp":"5"}')
    out = tmp_path / "latest.json"
    result = runner.invoke(cli, ["--output", str(out), "--pretty", "latest", *notes])
    assert result.exit_code == 0
    assert json.loads(out.read_text(encoding="utf-8")) == {"timestamp": "5"}


# ---------------------------------------------------------------------------
# notes
# ---------------------------------------------------------------------------

def test_notes_fetches_latest_report(runner, tmp_path, requests_mock):
    requests_mock.get(URL, json={"analyze_response": [
        {"note": [{"description": "x"}]},
        {"note": [{"description": "y"}]},
    ]})
    notes = write_notes(
        tmp_path,
        '{"timestamp":"1","url":"https://ci.example.com/old.json"}',
        f'{{"timestamp":"2","url":"{URL}","status":"fyi"}}',
    )
    result = runner.invoke(cli, ["notes", *notes])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "ref": REF,
        "report": {"timestamp": "2", "url": URL, "status": "fyi"},
        "notes": [{"description": "x"}, {"description": "y"}],
    }
    assert requests_mock.call_count == 1


def test_notes_unreachable_exits(runner, tmp_path, requests_mock):
    requests_mock.get(URL, exc=requests.exceptions.ConnectionError)
    notes = write_notes(tmp_path, f'{{"timestamp":"2","url":"{URL}"}}')
    result = runner.invoke(cli, ["notes", *notes])
    assert result.exit_code == 1
