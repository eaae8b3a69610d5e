"""CLI entrypoints for matchergen commands."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

from .config import ConfigError
from .declarations import DeclarationError
from .emit import FilerError
from .logging import configure_logging
from .orchestrator import GenerationOutcome, Orchestrator


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 timestamp: {value!r}") from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="matchergen",
        description="Generate hamcrest matcher sources from declared Java types.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Only report warnings.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate matchers for the configured types and packages.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root or its .matchergen.yml (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory receiving generated sources (overrides output_dir).",
    )
    generate_parser.add_argument(
        "--timestamp",
        type=_timestamp,
        default=None,
        help="Fixed ISO-8601 timestamp for the @Generated marker, for reproducible output.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print generated sources instead of writing them.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for matchergen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    orchestrator = Orchestrator()

    if args.command == "generate":
        try:
            outcome = orchestrator.run_generate(
                args.path,
                output=args.output,
                timestamp=args.timestamp,
                dry_run=bool(args.dry_run),
            )
        except (ConfigError, DeclarationError, FilerError) as exc:
            parser.exit(1, f"matchergen generate failed: {exc}\n")
        _report(outcome)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _report(outcome: GenerationOutcome) -> None:
    if outcome.dry_run:
        for unit in outcome.units:
            print(f"// {unit.relative_path}")
            print(unit.source, end="")
        return
    for path in outcome.written:
        print(f"Wrote {_relativize(path)}")
    if not outcome.written:
        print("No matchers generated")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
