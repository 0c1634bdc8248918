"""Command line entry point: ``python -m bill_audit analyze|metrics FILE``."""

import argparse
import asyncio
import logging
import sys

from bill_audit.config import resolve_config
from bill_audit.core.types import Document
from bill_audit.exceptions import BillAuditError, TerminalAnalysisError
from bill_audit.frontdoor import analyze_document, extract_document_metrics

# ruff: noqa: T201


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Audit a utility bill with Gemini and print the result as JSON",
        prog="python -m bill_audit",
    )
    parser.add_argument(
        "command",
        choices=("analyze", "metrics"),
        help="Full analysis (errors, comparison, tips) or bill metrics only",
    )
    parser.add_argument("file", help="PDF or image of the bill")
    parser.add_argument("--model", help="Gemini model to use")
    parser.add_argument(
        "--real",
        action="store_true",
        help="Call the Gemini API instead of the built-in sample answer",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log pipeline progress to stderr"
    )
    return parser


async def _run(args: argparse.Namespace) -> str:
    overrides: dict[str, object] = {}
    if args.model:
        overrides["model"] = args.model
    if args.real:
        overrides["use_real_api"] = True
    cfg = resolve_config(overrides or None).to_frozen()

    document = Document.from_file(args.file)
    if args.command == "metrics":
        metrics = await extract_document_metrics(document, cfg=cfg)
        return metrics.model_dump_json(by_alias=True, indent=2)
    record = await analyze_document(document, cfg=cfg)
    return record.model_dump_json(by_alias=True, indent=2)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return its exit status."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        output = asyncio.run(_run(args))
    except TerminalAnalysisError as e:
        print(f"Analysis failed: {e}", file=sys.stderr)
        return 1
    except BillAuditError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
