#!/usr/bin/env python3
"""Stamp values onto PDFs from the shell without running the API."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

import orjson

from pdfstamp.config import get_config
from pdfstamp.services.config.configuration_loader import (
    ConfigurationLoader,
    serialize_configuration,
)
from pdfstamp.services.stamping.stamp_orchestrator import (
    StampOrchestrator,
    create_document,
    modify_document,
)
from pdfstamp.utils.exceptions import StampError
from pdfstamp.utils.logging import configure_logging


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Overlay values onto PDF form templates")
    parser.add_argument("--config", type=Path, help="Writer configuration JSON (default: packaged)")
    parser.add_argument("--rules", type=Path, help="Rule set JSON used by modify (default: packaged)")
    parser.add_argument("--pdf-version", default=None, help="Declared PDF version of the output")
    parser.add_argument("--log-level", default=None, help="Logging level (default from PDFSTAMP_LOG_LEVEL)")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("show-config", help="Print the active writer configuration")

    modify = commands.add_parser("modify", help="Scan a PDF for markers and overlay rule values")
    modify.add_argument("--input", dest="input_path", type=Path, help="Source PDF")
    modify.add_argument("--output", dest="output_path", type=Path, help="Destination PDF")

    create = commands.add_parser("create", help="Build a new PDF from the configured placements")
    create.add_argument("--output", dest="output_path", type=Path, help="Destination PDF")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    config = get_config()
    configure_logging(level=args.log_level or config.LOG_LEVEL)

    loader = ConfigurationLoader(
        configuration_path=args.config or config.CONFIGURATION_PATH,
        rules_path=args.rules or config.RULES_PATH,
    )
    orchestrator = StampOrchestrator(
        pdf_version=args.pdf_version or config.PDF_VERSION,
        loader=loader,
    )

    try:
        configuration = loader.load_configuration()
        if args.command == "show-config":
            print(orjson.dumps(serialize_configuration(configuration), option=orjson.OPT_INDENT_2).decode())
            return 0

        if getattr(args, "output_path", None):
            configuration.output_file_path = str(args.output_path)
        if args.command == "modify":
            if args.input_path:
                configuration.input_file_path = str(args.input_path)
            result = modify_document(configuration, orchestrator)
        else:
            result = create_document(configuration, orchestrator)
    except StampError as exc:
        print(f"Invalid request: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Could not read configuration: {exc}", file=sys.stderr)
        return 1

    print(orjson.dumps(result.to_dict()).decode())
    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
