"""Tests for the command line interface and export runner."""

import io
import zipfile

import pytest

from blockswift import cli, configuration, exporter
from blockswift.cli import execute_export, exit_code_for, sanitise_project_name
from blockswift.errors import ArchiveError, ErrorCategory
from blockswift.rules import HEADER
from blockswift.structures import ProjectOptions


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    for key in configuration.BlockSwiftConfig.__field_infos__:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    configuration._load_config_instance.cache_clear()
    yield
    configuration._load_config_instance.cache_clear()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "program.js"
    path.write_text("const x = 1;\nconsole.log('hi');\n", encoding="utf-8")
    return path


def _run(**overrides):
    arguments = dict(
        output_file=None,
        export=False,
        project_name="Demo",
        archive_file=None,
        options=ProjectOptions(),
        seed=1,
        force_overwrite=False,
        verbose=False,
        debug_rules=False,
    )
    arguments.update(overrides)
    return execute_export(**arguments)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Demo", "Demo"),
        ("My App!", "My_App"),
        ("123go", "_123go"),
        ("Café", "Caf"),
        ("   ", "MyXcodeProject"),
    ],
)
def test_sanitise_project_name(name, expected):
    assert sanitise_project_name(name) == expected


def test_swift_goes_to_stdout_by_default(source_file, capsys):
    exit_code, summary, message = _run(input_file=str(source_file))
    assert exit_code == 0
    assert message is None
    out = capsys.readouterr().out
    assert out == HEADER + 'let x = 1\nprint("hi")\n'
    assert summary.archive_path is None


def test_swift_written_to_file(source_file, tmp_path):
    target = tmp_path / "out" / "Program.swift"
    exit_code, summary, _ = _run(input_file=str(source_file), output_file=str(target))
    assert exit_code == 0
    assert target.read_text(encoding="utf-8").startswith(HEADER)
    assert summary.swift_path == target.resolve()


def test_export_writes_archive_next_to_input(source_file, tmp_path):
    exit_code, summary, _ = _run(input_file=str(source_file), export=True)
    assert exit_code == 0
    archive = tmp_path / "Demo.zip"
    assert archive.exists()
    assert summary.archive_entries == 13
    with zipfile.ZipFile(io.BytesIO(archive.read_bytes())) as reader:
        content = reader.read("Demo/ContentView.swift").decode("utf-8")
    assert content.endswith('print("hi")\n')


def test_seeded_exports_are_identical(source_file, tmp_path):
    _run(input_file=str(source_file), export=True, archive_file=str(tmp_path / "a.zip"))
    _run(input_file=str(source_file), export=True, archive_file=str(tmp_path / "b.zip"))
    assert (tmp_path / "a.zip").read_bytes() == (tmp_path / "b.zip").read_bytes()


def test_existing_archive_is_not_overwritten(source_file, tmp_path):
    (tmp_path / "Demo.zip").write_bytes(b"keep")
    exit_code, summary, message = _run(input_file=str(source_file), export=True)
    assert exit_code == 1
    assert summary is None
    assert "already exists" in message
    assert (tmp_path / "Demo.zip").read_bytes() == b"keep"


def test_force_overwrites_archive(source_file, tmp_path):
    (tmp_path / "Demo.zip").write_bytes(b"old")
    exit_code, _, _ = _run(input_file=str(source_file), export=True, force_overwrite=True)
    assert exit_code == 0
    assert zipfile.is_zipfile(tmp_path / "Demo.zip")


def test_output_cannot_replace_input(source_file):
    exit_code, _, message = _run(
        input_file=str(source_file), output_file=str(source_file), force_overwrite=True
    )
    assert exit_code == 1
    assert "Refusing to overwrite" in message


def test_missing_input(tmp_path):
    exit_code, _, message = _run(input_file=str(tmp_path / "absent.js"))
    assert exit_code == 1
    assert "not found" in message


def test_empty_program_cannot_be_exported(tmp_path):
    path = tmp_path / "empty.js"
    path.write_text("   \n", encoding="utf-8")
    exit_code, _, message = _run(input_file=str(path), export=True)
    assert exit_code == 1
    assert "no Swift code" in message
    assert not (tmp_path / "Demo.zip").exists()


def test_stdin_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("let y = 2;"))
    exit_code, summary, _ = _run(input_file="-")
    assert exit_code == 0
    assert summary.input_label == "<stdin>"
    assert capsys.readouterr().out == HEADER + "let y = 2\n"


def test_debug_rules_trace_to_stderr(source_file, capsys):
    _run(input_file=str(source_file), debug_rules=True)
    err = capsys.readouterr().err
    assert "[blockswift][rules-debug] declarations:" in err
    assert "[blockswift][rules-debug] print-quotes:" in err


def test_summary_lists_applied_groups(source_file):
    _, summary, _ = _run(input_file=str(source_file))
    assert summary.rule_groups_applied == [
        "declarations",
        "terminators",
        "output-calls",
        "print-quotes",
        "header",
    ]
    assert summary.source_lines == 2
    assert summary.swift_lines == 3


def test_main_exports_with_configured_defaults(source_file, tmp_path, monkeypatch):
    monkeypatch.setenv("BLOCKSWIFT_PROJECT_NAME", "Sample App")
    exit_code = cli.main([str(source_file), "--export", "--seed", "5"])
    assert exit_code == 0
    archive = tmp_path / "Sample_App.zip"
    with zipfile.ZipFile(archive) as reader:
        assert "Sample_App/Sample_AppApp.swift" in reader.namelist()


def test_main_reports_errors(tmp_path, capsys):
    exit_code = cli.main([str(tmp_path / "missing.js")])
    assert exit_code == 1
    assert "not found" in capsys.readouterr().err


def test_every_error_category_has_an_exit_code():
    assert {category: exit_code_for(category) for category in ErrorCategory} == {
        ErrorCategory.ARGUMENT: 1,
        ErrorCategory.FILE_IO: 1,
        ErrorCategory.CONFIGURATION: 1,
        ErrorCategory.PROJECT: 1,
        ErrorCategory.ARCHIVE: 1,
        ErrorCategory.INTERRUPTED: 2,
        ErrorCategory.OTHER: 1,
    }


def test_archive_failure_exit_code_follows_category(source_file, monkeypatch):
    def fail(files):
        raise ArchiveError("disk full")

    monkeypatch.setattr(exporter, "build_archive", fail)
    exit_code, summary, message = _run(input_file=str(source_file), export=True)
    assert exit_code == exit_code_for(ArchiveError.category) == 1
    assert summary is None
    assert message == "disk full"


def test_interrupted_run_exits_with_two(source_file, monkeypatch):
    def interrupt(self, source, *, input_label):
        raise KeyboardInterrupt

    monkeypatch.setattr(exporter.ExportRunner, "run", interrupt)
    exit_code, _, message = _run(input_file=str(source_file))
    assert exit_code == 2
    assert "interrupted" in message
