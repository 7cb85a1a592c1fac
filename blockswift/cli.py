"""Command line interface for the BlockSwift converter."""

from __future__ import annotations

import argparse
import pathlib
import re
import sys
from typing import Iterable, Optional

from .configuration import get_settings, project_options
from .errors import BlockSwiftError, ConfigurationError, ErrorCategory
from .exporter import ExportRunner, ExportSummary, validate_paths
from .structures import ProjectOptions

STDIN_MARKER = "-"

EXIT_CODES = {
    ErrorCategory.ARGUMENT: 1,
    ErrorCategory.FILE_IO: 1,
    ErrorCategory.CONFIGURATION: 1,
    ErrorCategory.PROJECT: 1,
    ErrorCategory.ARCHIVE: 1,
    ErrorCategory.INTERRUPTED: 2,
    ErrorCategory.OTHER: 1,
}


def exit_code_for(category: ErrorCategory) -> int:
    return EXIT_CODES.get(category, 1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blockswift",
        description=(
            "Convert block-generated JavaScript into Swift and package it as an Xcode project."
        ),
    )
    parser.add_argument(
        "input_file",
        help="Path to the JavaScript file to convert, or '-' to read standard input.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the Swift code to this file instead of standard output.",
    )
    parser.add_argument(
        "-x",
        "--export",
        action="store_true",
        help="Also build a zipped Xcode project containing the Swift code.",
    )
    parser.add_argument(
        "-n",
        "--project-name",
        help="Xcode project name (default: from configuration, MyXcodeProject).",
    )
    parser.add_argument(
        "-a",
        "--archive",
        help="Archive path. Defaults to <project name>.zip next to the input file.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting output files that already exist.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for project identifiers, for reproducible archives.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show progress information.",
    )
    parser.add_argument(
        "--debug-rules",
        action="store_true",
        help="Print the text before and after every rule group that changes it.",
    )
    return parser


def sanitise_project_name(name: str) -> str:
    """Reduce a free-form name to a Swift-identifier-safe project name."""

    collapsed = re.sub(r"\s+", "_", name.strip())
    ascii_only = collapsed.encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^A-Za-z0-9_]+", "", ascii_only)
    if cleaned and cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    return cleaned or "MyXcodeProject"


def derive_archive_path(input_path: pathlib.Path | None, project_name: str) -> pathlib.Path:
    directory = input_path.parent if input_path is not None else pathlib.Path.cwd()
    return directory / f"{project_name}.zip"


def execute_export(
    *,
    input_file: str,
    output_file: str | None,
    export: bool,
    project_name: str,
    archive_file: str | None,
    options: ProjectOptions,
    seed: int | None,
    force_overwrite: bool,
    verbose: bool,
    debug_rules: bool,
) -> tuple[int, ExportSummary | None, str | None]:
    """Execute a conversion run and return the exit code, summary, and message."""

    input_path = (
        None
        if input_file == STDIN_MARKER
        else pathlib.Path(input_file).expanduser().resolve()
    )
    swift_path = (
        pathlib.Path(output_file).expanduser().resolve() if output_file else None
    )
    archive_path: pathlib.Path | None = None
    if export:
        archive_path = (
            pathlib.Path(archive_file).expanduser().resolve()
            if archive_file
            else derive_archive_path(input_path, project_name)
        )

    outputs = [path for path in (swift_path, archive_path) if path is not None]
    try:
        validate_paths(input_path, outputs, force_overwrite=force_overwrite)
    except FileNotFoundError as exc:
        return exit_code_for(ErrorCategory.FILE_IO), None, str(exc)
    except BlockSwiftError as exc:
        return exit_code_for(exc.category), None, str(exc)

    try:
        if input_path is None:
            source = sys.stdin.read()
            input_label = "<stdin>"
        else:
            source = input_path.read_text(encoding="utf-8")
            input_label = str(input_path)
    except (OSError, UnicodeDecodeError) as exc:
        return exit_code_for(ErrorCategory.FILE_IO), None, f"Could not read the input: {exc}"

    for path in outputs:
        path.parent.mkdir(parents=True, exist_ok=True)

    runner = ExportRunner(
        project_name=project_name,
        swift_path=swift_path,
        archive_path=archive_path,
        options=options,
        seed=seed,
        verbose=verbose,
        debug_rules=debug_rules,
    )

    try:
        summary = runner.run(source, input_label=input_label)
    except BlockSwiftError as exc:
        return exit_code_for(exc.category), None, str(exc)
    except OSError as exc:
        return exit_code_for(ErrorCategory.FILE_IO), None, f"Could not write the output: {exc}"
    except KeyboardInterrupt:
        return exit_code_for(ErrorCategory.INTERRUPTED), None, "Conversion interrupted by user."

    return 0, summary, None


def print_summary(summary: ExportSummary) -> None:
    """Output a friendly report once processing completes."""

    stream = sys.stdout if summary.swift_path is not None else sys.stderr
    print("\nConversion complete.", file=stream)
    print(f"  Input:           {summary.input_label}", file=stream)
    print(
        f"  Lines:           {summary.source_lines} JavaScript -> "
        f"{summary.swift_lines} Swift",
        file=stream,
    )
    print(f"  Rule groups:     {len(summary.rule_groups_applied)} applied", file=stream)
    if summary.swift_path:
        print(f"  Swift file:      {summary.swift_path}", file=stream)
    if summary.archive_path:
        print(f"  Project:         {summary.project_name}", file=stream)
        print(
            f"  Archive:         {summary.archive_path} "
            f"({summary.archive_entries} files, {summary.archive_bytes} bytes)",
            file=stream,
        )
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds", file=stream)


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return exit_code_for(exc.category)

    debug_rules = bool(args.debug_rules or settings.BLOCKSWIFT_DEBUG_RULES)
    project_name = sanitise_project_name(
        args.project_name or settings.BLOCKSWIFT_PROJECT_NAME
    )

    exit_code, summary, message = execute_export(
        input_file=args.input_file,
        output_file=args.output,
        export=args.export,
        project_name=project_name,
        archive_file=args.archive,
        options=project_options(settings),
        seed=args.seed,
        force_overwrite=args.force,
        verbose=args.verbose,
        debug_rules=debug_rules,
    )

    if message:
        print(message, file=sys.stderr)
    if summary and args.verbose:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
