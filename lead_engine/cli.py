"""Command line interface for researching a company and its contacts."""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

from dotenv import load_dotenv

from .config import ConfigurationError, load_settings
from .factory import build_session
from .io import export_leads, write_report
from .models import EnrichmentStatus
from .reconcile import sort_by_confidence
from .session import LeadSession

LOGGER = logging.getLogger(__name__)

STATIC_BACKEND = "lead_engine.providers.sample.StaticSearchModel"


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description="Research a company with a web-grounded AI model and list its key contacts",
    )
    parser.add_argument("company", help="Company name or website to research")
    parser.add_argument("--location", default="", help="Optional location to focus the research on")
    parser.add_argument("--config", help="Path to a configuration file (YAML or JSON)")
    parser.add_argument(
        "--enrich",
        action="store_true",
        help="Run the enrichment pass for every contact after research",
    )
    parser.add_argument(
        "--dispatch",
        action="store_true",
        help="Send the leads to the configured CRM webhook",
    )
    parser.add_argument("--output", help="Write leads to a CSV or Excel file")
    parser.add_argument("--report", help="Write the full report (overview, leads, sources) as JSON")
    parser.add_argument(
        "--responses",
        help="Replay model responses from a JSON file instead of calling the live model",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING)",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def print_session(session: LeadSession, stream: Optional[TextIO] = None) -> None:
    """Render the session as plain text."""

    stream = stream or sys.stdout
    print(f"== {session.company}", file=stream)
    print(session.overview, file=stream)
    print("", file=stream)
    print(f"== Contacts ({len(session.leads)})", file=stream)
    for lead in session.leads:
        marker = "*" if lead.is_primary_target else "-"
        print(f"{marker} {lead.display_name()} | {lead.role or 'Not Found'}", file=stream)
        print(f"    email: {lead.email or 'Not Found'}  phone: {lead.phone or 'Not Found'}", file=stream)
        status = lead.enrichment_status
        if status is EnrichmentStatus.ENRICHED and lead.enriched_data is not None:
            data = lead.enriched_data
            if data.summary:
                print(f"    summary: {data.summary}", file=stream)
            if data.linkedin_url:
                print(f"    linkedin: {data.linkedin_url}", file=stream)
            for item in sort_by_confidence(data.emails):
                print(f"    email [{item.confidence.value}]: {item.value}", file=stream)
            for item in sort_by_confidence(data.phones):
                print(f"    phone [{item.confidence.value}]: {item.value}", file=stream)
        elif status is EnrichmentStatus.NOT_FOUND:
            print("    enrichment: no additional details found", file=stream)
        elif status is EnrichmentStatus.FAILED:
            print(f"    enrichment failed: {lead.enrichment_error}", file=stream)

    labelled = [source for source in session.sources if source.label()]
    if labelled:
        print("", file=stream)
        print("== Sources", file=stream)
        for source in labelled:
            print(f"- {source.label()} {source.uri or ''}".rstrip(), file=stream)


async def run(args: argparse.Namespace) -> int:
    overrides = {}
    search_options = None
    if args.responses:
        overrides["search_backend"] = STATIC_BACKEND
        search_options = {"response_file": args.responses}
    settings = load_settings(args.config, overrides=overrides)
    session = build_session(settings, search_options=search_options)

    if not await session.research(args.company, args.location):
        LOGGER.error(session.error)
        return 1

    if args.enrich:
        await session.enrich_all()

    print_session(session)

    if args.output:
        path = export_leads(session.leads, args.output, company=session.company)
        LOGGER.info("Leads written to %s", Path(path).resolve())
    if args.report:
        path = write_report(
            args.report,
            company=session.company,
            overview=session.overview,
            leads=session.leads,
            sources=session.sources,
        )
        LOGGER.info("Report written to %s", Path(path).resolve())

    if args.dispatch:
        if not await session.dispatch_to_crm():
            LOGGER.error("CRM dispatch failed: %s", session.dispatch_error)
            return 3
        LOGGER.info("Sent %s leads to the CRM webhook", len(session.leads))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    load_dotenv()

    try:
        return asyncio.run(run(args))
    except ConfigurationError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
