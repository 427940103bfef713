"""Export helpers for research results."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, MutableMapping, Optional, Sequence, Union

import pandas as pd

from .models import EnrichedContactInfo, GroundingChunk, Lead
from .reconcile import best_email, best_phone, sort_by_confidence

PathLike = Union[str, Path]

_CSV_SUFFIXES = {".csv", ".tsv"}
_EXCEL_SUFFIXES = {".xls", ".xlsx", ".xlsm", ".xlsb"}


def _join_list(values: Iterable[Optional[str]]) -> str:
    cleaned: List[str] = []
    for value in values:
        if not value:
            continue
        text = str(value).strip()
        if text:
            cleaned.append(text)
    return "; ".join(cleaned)


def _format_contact_info(items: Iterable[EnrichedContactInfo]) -> str:
    return _join_list(f"{item.value} ({item.confidence.value})" for item in sort_by_confidence(items))


def _lead_to_row(lead: Lead, company: str) -> MutableMapping[str, object]:
    enriched = lead.enriched_data
    return {
        "company": company,
        "name": lead.name or "",
        "role": lead.role or "",
        "email": lead.email or "",
        "phone": lead.phone or "",
        "is_primary_target": lead.is_primary_target,
        "enrichment_status": lead.enrichment_status.value,
        "enrichment_error": lead.enrichment_error or "",
        "best_email": best_email(lead),
        "best_phone": best_phone(lead),
        "linkedin_url": (enriched.linkedin_url if enriched else None) or "",
        "summary": (enriched.summary if enriched else None) or "",
        "enriched_emails": _format_contact_info(enriched.emails) if enriched else "",
        "enriched_phones": _format_contact_info(enriched.phones) if enriched else "",
    }


def leads_to_dataframe(leads: Sequence[Lead], *, company: str = "") -> pd.DataFrame:
    """Convert leads into a :class:`pandas.DataFrame`, one row per lead."""

    return pd.DataFrame([_lead_to_row(lead, company) for lead in leads])


def export_leads(
    leads: Sequence[Lead],
    path: PathLike,
    *,
    company: str = "",
    sheet_name: str = "Leads",
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write leads to a CSV/TSV or Excel file."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    dataframe = leads_to_dataframe(leads, company=company)
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = output_path.suffix.lower()

    if suffix in _CSV_SUFFIXES:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        dataframe.to_csv(output_path, index=False, **exporter_kwargs)
        return output_path

    if suffix in _EXCEL_SUFFIXES:
        engine = exporter_kwargs.pop("engine", None) or "openpyxl"
        dataframe.to_excel(output_path, index=False, sheet_name=sheet_name, engine=engine, **exporter_kwargs)
        return output_path

    raise ValueError(f"Unsupported export file extension: {suffix}")


def write_report(
    path: PathLike,
    *,
    company: str,
    overview: str,
    leads: Sequence[Lead],
    sources: Sequence[GroundingChunk],
) -> Path:
    """Write the full research report (overview, leads, sources) as JSON."""

    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    report = {
        "company": company,
        "overview": overview,
        "leads": [lead.to_dict() for lead in leads],
        "sources": [source.to_dict() for source in sources if source.web is not None],
    }
    output_path.write_text(json.dumps(report, indent=2, ensure_ascii=False), encoding="utf-8")
    return output_path


__all__ = ["export_leads", "leads_to_dataframe", "write_report"]
