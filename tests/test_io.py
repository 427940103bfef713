from __future__ import annotations

import json
from pathlib import Path

import pandas as pd
import pytest

from lead_engine.io import export_leads, leads_to_dataframe, write_report
from lead_engine.models import (
    Confidence,
    EnrichedContactInfo,
    EnrichedData,
    EnrichmentStatus,
    GroundingChunk,
    Lead,
    WebSource,
)


def _leads():
    enriched = EnrichedData(
        summary="Runs the Southeast fleet.",
        linkedin_url="https://www.linkedin.com/in/janedoe",
        emails=(
            EnrichedContactInfo("j.doe@walmart.com", Confidence.MEDIUM),
            EnrichedContactInfo("jane.doe@walmart.com", Confidence.HIGH),
        ),
    )
    return [
        Lead(
            name="Jane Doe",
            role="Fleet Manager",
            is_primary_target=True,
            enriched_data=enriched,
            enrichment_status=EnrichmentStatus.ENRICHED,
        ),
        Lead(name="John Roe", phone="555-0100", enrichment_status=EnrichmentStatus.FAILED, enrichment_error="boom"),
    ]


def test_leads_to_dataframe_flattens_enrichment() -> None:
    frame = leads_to_dataframe(_leads(), company="Walmart")

    first = frame.iloc[0]
    assert first["company"] == "Walmart"
    assert first["best_email"] == "jane.doe@walmart.com"
    assert first["enriched_emails"] == "jane.doe@walmart.com (high); j.doe@walmart.com (medium)"
    assert first["enrichment_status"] == "enriched"

    second = frame.iloc[1]
    assert second["best_phone"] == "555-0100"
    assert second["enrichment_error"] == "boom"
    assert second["linkedin_url"] == ""


def test_export_leads_csv(tmp_path: Path) -> None:
    path = export_leads(_leads(), tmp_path / "out" / "leads.csv", company="Walmart")

    frame = pd.read_csv(path, keep_default_na=False)
    assert list(frame["name"]) == ["Jane Doe", "John Roe"]
    assert list(frame["is_primary_target"]) == [True, False]


def test_export_leads_excel(tmp_path: Path) -> None:
    pytest.importorskip("openpyxl")

    path = export_leads(_leads(), tmp_path / "leads.xlsx", sheet_name="Walmart")

    frame = pd.read_excel(path, sheet_name="Walmart", engine="openpyxl")
    assert list(frame["name"]) == ["Jane Doe", "John Roe"]


def test_export_leads_rejects_unknown_extension(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_leads(_leads(), tmp_path / "leads.parquet")


def test_write_report_keeps_lead_shape_and_skips_empty_sources(tmp_path: Path) -> None:
    sources = [GroundingChunk(web=WebSource(uri="https://corporate.walmart.com", title="Walmart")), GroundingChunk()]

    path = write_report(
        tmp_path / "report.json",
        company="Walmart",
        overview="Overview text",
        leads=_leads(),
        sources=sources,
    )

    report = json.loads(path.read_text(encoding="utf-8"))
    assert report["overview"] == "Overview text"
    assert report["sources"] == [{"web": {"uri": "https://corporate.walmart.com", "title": "Walmart"}}]
    assert report["leads"][0]["enrichedData"]["linkedinUrl"] == "https://www.linkedin.com/in/janedoe"
    assert report["leads"][1]["email"] == "Not Found"
    assert report["leads"][1]["enrichmentError"] == "boom"
