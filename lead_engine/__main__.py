"""``python -m lead_engine <company>``: research a company from the command line.

Equivalent to the ``lead-engine`` console script; see :mod:`lead_engine.cli`
for the options (location focus, enrichment, CRM dispatch and export).
"""
from __future__ import annotations

import sys

from . import cli


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    # A company is required; without any arguments show usage instead of an argparse error.
    if not argv:
        cli.build_parser(prog="python -m lead_engine").print_help()
        return 2

    return cli.main(argv)


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
