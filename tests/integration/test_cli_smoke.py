from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from ipintel.cli import parse_args, run_command
from ipintel.common.constants import EXIT_PARTIAL, EXIT_SUCCESS
from ipintel.common.fs import read_json


class FakeHttpClient:
    def __init__(self, payload):
        self.payload = payload

    def get_json(self, url: str, **_kwargs):
        return self.payload

    def close(self):
        return None


@pytest.mark.integration
def test_cli_lookup_prints_envelope_and_writes_output(tmp_path: Path, capsys):
    payload = {"status": "success", "country": "Testland", "city": "Sample", "lat": 1.0, "lon": 2.0, "query": "192.0.2.1"}
    out_path = tmp_path / "out" / "lookup.json"
    log_path = tmp_path / "logs" / "run.jsonl"
    args = parse_args(
        [
            "lookup",
            "192.0.2.1",
            "--config-dir",
            "config",
            "--request-id",
            "req-test",
            "--output",
            str(out_path),
            "--log-file",
            str(log_path),
        ]
    )

    exit_code = run_command(args, client=FakeHttpClient(payload))

    assert exit_code == EXIT_SUCCESS
    printed = json.loads(capsys.readouterr().out)
    assert printed["output"]["location"]["country"] == "Testland"
    assert read_json(out_path) == printed
    log_lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert {line["request_id"] for line in log_lines} == {"req-test"}
    assert "OPERATION_END" in {line["event"] for line in log_lines}
    assert logging.getLogger("ipintel.req-test").handlers == []


@pytest.mark.integration
def test_cli_wrong_target_count_reports_error(capsys):
    args = parse_args(["distance", "192.0.2.1", "--config-dir", "config"])

    exit_code = run_command(args, client=FakeHttpClient({}))

    assert exit_code == EXIT_PARTIAL
    assert "error" in json.loads(capsys.readouterr().out)["output"]


@pytest.mark.integration
def test_cli_failed_lookup_exits_partial(capsys):
    args = parse_args(["threat", "192.0.2.1", "--config-dir", "config"])

    exit_code = run_command(args, client=FakeHttpClient({"status": "fail", "message": "reserved range"}))

    assert exit_code == EXIT_PARTIAL
    assert json.loads(capsys.readouterr().out)["output"]["error"] == "reserved range"
