# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness for module override conflict checks."""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from mocs.checker import ModuleOverrideChecker, OverrideScanError, ScanResult
from mocs.config import CheckerConfig
from mocs.extractor import ExtractionResult, extract_members
from mocs.scope import SCOPE_STRATEGIES
from mocs.translator import PositionalTranslator

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFLICT = 1
EXIT_ERROR = 2


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="mocs")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check")
    check_parser.add_argument(
        "--module-overrides",
        required=True,
        help="Override directory of the module being installed.",
    )
    check_parser.add_argument(
        "--existing-overrides",
        required=True,
        help="Installed overrides directory, with trailing separator.",
    )
    check_parser.add_argument(
        "--extension", default=".php", help="Override file extension."
    )
    _add_scope_strategy_argument(check_parser)
    _add_format_arguments(check_parser)

    members_parser = subparsers.add_parser("members")
    members_parser.add_argument(
        "--path", required=True, help="Override file to inspect."
    )
    _add_scope_strategy_argument(members_parser)
    _add_format_arguments(members_parser)
    return parser


def _add_scope_strategy_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--scope-strategy",
        choices=SCOPE_STRATEGIES,
        default="next_brace",
        help="Function-body tracking used for property extraction.",
    )


def _add_format_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code: 0 without conflicts, 1 with conflicts, 2 on errors.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return EXIT_ERROR
    if args.command == "check":
        return _run_check(args=args, stdout=stdout, stderr=stderr)
    if args.command == "members":
        return _run_members(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return EXIT_ERROR


def _run_check(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run check command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    try:
        config = CheckerConfig(
            extension=args.extension, scope_strategy=args.scope_strategy
        )
        checker = ModuleOverrideChecker(
            translator=PositionalTranslator(),
            override_dir=args.existing_overrides,
            config=config,
        )
    except ValueError as exc:
        logger.warning(f"Invalid configuration (error={exc})")
        stderr.write(f"Invalid configuration: {exc}\n")
        return EXIT_ERROR

    try:
        result = checker.scan(args.module_overrides)
    except OverrideScanError as exc:
        logger.warning(f"Override scan aborted (error={exc})")
        stderr.write(f"Override scan aborted: {exc}\n")
        return EXIT_ERROR

    if args.format == "json":
        payload = _scan_payload(result)
        if args.output:
            try:
                _write_json_file(payload=payload, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return EXIT_ERROR
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_conflict_table(result=result, stdout=stdout)
    return EXIT_CONFLICT if result.has_conflict else EXIT_OK


def _run_members(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run members command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    path = Path(args.path)
    if not path.is_file():
        logger.warning(f"Path is not a file (path={path})")
        stderr.write(f"Path is not a file: {path}\n")
        return EXIT_ERROR
    try:
        content = path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        logger.warning(f"Failed reading file (path={path} error={exc})")
        stderr.write(f"Failed reading file: {path}\n")
        return EXIT_ERROR

    members = extract_members(content, scope_strategy=args.scope_strategy)
    if args.format == "json":
        payload = {"path": str(path), **asdict(members)}
        if args.output:
            try:
                _write_json_file(payload=payload, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return EXIT_ERROR
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_members_table(path=path, members=members, stdout=stdout)
    return EXIT_OK


def _scan_payload(result: ScanResult) -> dict[str, object]:
    return {
        "has_conflict": result.has_conflict,
        "errors": result.errors,
        "files_scanned": result.files_scanned,
        "pairs_compared": result.pairs_compared,
        "conflicts": [asdict(conflict) for conflict in result.conflicts],
    }


def _write_json(payload: dict[str, object], stdout: TextIO) -> None:
    """Write a payload in JSON format.

    Args:
        payload: JSON-serializable payload.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(payload: dict[str, object], output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Args:
        payload: JSON-serializable payload.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8"
    )


def _write_conflict_table(result: ScanResult, stdout: TextIO) -> None:
    """Write scan conflicts as a table followed by the messages.

    Args:
        result: Scan outcome.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    summary = (
        f"files_scanned={result.files_scanned} "
        f"pairs_compared={result.pairs_compared} "
        f"conflicts={len(result.conflicts)}"
    )
    if not result.has_conflict:
        console.print(
            f"No override conflicts found ({summary})", markup=False, soft_wrap=True
        )
        return

    console.rule("override conflicts", style=Style(color="red"), characters="-")
    table = Table(show_header=True, show_lines=True, expand=True)
    table.add_column("candidate_path", ratio=3, overflow="fold")
    table.add_column("existing_path", ratio=3, overflow="fold")
    table.add_column("collisions", ratio=2, overflow="fold")
    for conflict in result.conflicts:
        table.add_row(
            conflict.candidate_path,
            conflict.existing_path,
            "\n".join(
                f"{collision.member_kind} {collision.name}"
                for collision in conflict.collisions
            ),
        )
    console.print(table)
    for message in result.errors:
        console.print(message, markup=False, highlight=False, soft_wrap=True)
    console.print(summary, markup=False, highlight=False)


def _write_members_table(path: Path, members: ExtractionResult, stdout: TextIO) -> None:
    """Write extracted members of one file as a table.

    Args:
        path: Inspected file.
        members: Extracted member names.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.rule(f"{path.resolve()}", style=Style(color="cyan"), characters="-")
    table = Table(show_header=True, show_lines=False, expand=True)
    table.add_column("kind", ratio=1, overflow="fold")
    table.add_column("name", ratio=3, overflow="fold")
    for kind, names in (
        ("method", members.methods),
        ("property", members.properties),
        ("constant", members.constants),
    ):
        for name in names:
            table.add_row(kind, name)
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
