"""High-level orchestration: read JavaScript, write Swift and Xcode archives."""

from __future__ import annotations

import pathlib
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .archive import build_archive
from .errors import BlockSwiftError, EmptyTranslationError, OverwriteRefusedError
from .identifiers import build_identifier_source
from .project import build_project
from .structures import ProjectDescriptor, ProjectOptions
from .transpiler import Transpiler


@dataclass
class ExportSummary:
    """Report returned after a conversion run."""

    input_label: str
    project_name: str
    source_lines: int
    swift_lines: int
    rule_groups_applied: List[str]
    swift_path: pathlib.Path | None
    archive_path: pathlib.Path | None
    archive_entries: int
    archive_bytes: int
    elapsed_seconds: float


class ExportRunner:
    """Coordinates translation, project materialisation and file output."""

    def __init__(
        self,
        *,
        project_name: str,
        swift_path: pathlib.Path | None,
        archive_path: pathlib.Path | None,
        options: ProjectOptions,
        seed: int | None,
        verbose: bool,
        debug_rules: bool,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ) -> None:
        self.project_name = project_name
        self.swift_path = swift_path
        self.archive_path = archive_path
        self.options = options
        self.seed = seed
        self.verbose = verbose
        self.debug_rules = debug_rules
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

        self._applied: List[str] = []

    def run(self, source: str, *, input_label: str) -> ExportSummary:
        start_time = time.time()
        self._applied = []

        transpiler = Transpiler(trace=self._trace)
        swift_code = transpiler.translate(source)
        if self.verbose:
            self._say(
                f"Translated {input_label}: {len(self._applied)} rule groups changed the text."
            )

        if self.swift_path is not None:
            self.swift_path.write_text(swift_code, encoding="utf-8")
            if self.verbose:
                self._say(f"Wrote Swift code to {self.swift_path}.")
        else:
            self.stdout.write(swift_code)
            if swift_code and not swift_code.endswith("\n"):
                self.stdout.write("\n")

        archive_entries = 0
        archive_bytes = 0
        if self.archive_path is not None:
            if not swift_code:
                raise EmptyTranslationError(
                    "There is no Swift code to export. Provide a non-empty JavaScript program."
                )
            descriptor = ProjectDescriptor(
                project_name=self.project_name,
                translated_body=swift_code,
            )
            project = build_project(
                descriptor,
                identifiers=build_identifier_source(self.seed),
                options=self.options,
            )
            payload = build_archive(project.files)
            self.archive_path.write_bytes(payload)
            archive_entries = len(project.files)
            archive_bytes = len(payload)
            if self.verbose:
                self._say(
                    f"Packaged {archive_entries} files ({archive_bytes} bytes) "
                    f"into {self.archive_path}."
                )

        return ExportSummary(
            input_label=input_label,
            project_name=self.project_name,
            source_lines=len(source.splitlines()),
            swift_lines=len(swift_code.splitlines()),
            rule_groups_applied=list(self._applied),
            swift_path=self.swift_path,
            archive_path=self.archive_path,
            archive_entries=archive_entries,
            archive_bytes=archive_bytes,
            elapsed_seconds=time.time() - start_time,
        )

    def _trace(self, group: str, before: str, after: str) -> None:
        self._applied.append(group)
        if not self.debug_rules:
            return
        print(
            f"[blockswift][rules-debug] {group}:\n--- before\n{before}\n+++ after\n{after}",
            file=self.stderr,
        )

    def _say(self, message: str) -> None:
        # Progress goes to stderr when stdout carries the Swift code itself.
        stream = self.stdout if self.swift_path is not None else self.stderr
        print(message, file=stream)


def validate_paths(
    input_path: pathlib.Path | None,
    outputs: List[pathlib.Path],
    force_overwrite: bool,
) -> None:
    """Validate input/output path combinations and overwrite policy."""

    if input_path is not None:
        if not input_path.exists():
            raise FileNotFoundError(
                "Input file not found. Please provide a readable JavaScript file."
            )
        if not input_path.is_file():
            raise BlockSwiftError("Input path must be a file.")

    for output_path in outputs:
        if input_path is not None and input_path.resolve() == output_path.resolve():
            raise OverwriteRefusedError(
                "The output path matches the input file. Refusing to overwrite the source."
            )
        if output_path.exists() and not force_overwrite:
            raise OverwriteRefusedError(
                f"{output_path} already exists. Rename it or use the overwrite flag."
            )
