"""Smoke tests for the CLI entry point."""
from __future__ import annotations

import json

import pytest

from lead_engine import __main__
from lead_engine.cli import main

RESEARCH = {
    "overview": "Walmart is expanding its private truck fleet.",
    "contacts": [
        {
            "name": "Jane Doe",
            "role": "Fleet Manager",
            "email": "jane.doe@walmart.com",
            "phone": "Not Found",
            "isPrimaryTarget": True,
        },
        {"name": "No Details", "role": "Not Found", "email": "Not Found", "phone": "Not Found"},
    ],
}
ENRICHMENT = {
    "summary": "Leads fleet operations for the Southeast region.",
    "linkedinUrl": "https://www.linkedin.com/in/janedoe",
    "emails": [{"value": "jane.doe@walmart.com", "confidence": "high"}],
    "phones": [],
}


@pytest.fixture
def responses_file(tmp_path):
    path = tmp_path / "responses.json"
    path.write_text(json.dumps([json.dumps(RESEARCH), ENRICHMENT]), encoding="utf-8")
    return path


def test_cli_smoke_runs_with_replayed_responses(tmp_path, responses_file, capsys) -> None:
    output_path = tmp_path / "leads.csv"
    report_path = tmp_path / "report.json"

    exit_code = main(
        [
            "Walmart",
            "--responses",
            str(responses_file),
            "--enrich",
            "--output",
            str(output_path),
            "--report",
            str(report_path),
        ]
    )

    assert exit_code == 0
    out = capsys.readouterr().out
    assert "== Walmart" in out
    assert "* Jane Doe | Fleet Manager" in out
    assert "No Details" not in out
    assert "linkedin: https://www.linkedin.com/in/janedoe" in out

    assert "jane.doe@walmart.com" in output_path.read_text(encoding="utf-8")
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["company"] == "Walmart"
    assert report["leads"][0]["enrichmentStatus"] == "enriched"


def test_cli_reports_research_failure(tmp_path) -> None:
    path = tmp_path / "responses.json"
    path.write_text(json.dumps(["The model could not help with that."]), encoding="utf-8")

    assert main(["Walmart", "--responses", str(path)]) == 1


def test_cli_dispatch_without_webhook_fails(responses_file, monkeypatch) -> None:
    monkeypatch.delenv("LEAD_ENGINE_CRM_ENDPOINT", raising=False)

    assert main(["Walmart", "--responses", str(responses_file), "--dispatch"]) == 3


def test_module_entry_point_delegates_to_cli(responses_file, capsys) -> None:
    exit_code = __main__.main(["Walmart", "--responses", str(responses_file)])

    assert exit_code == 0
    assert "Jane Doe" in capsys.readouterr().out


def test_module_entry_point_without_arguments_shows_help(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = __main__.main([])

    captured = capsys.readouterr()
    assert "python -m lead_engine" in captured.out
    assert exit_code == 2
