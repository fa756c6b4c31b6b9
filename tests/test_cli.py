from __future__ import annotations

import os
import textwrap
import uuid
from pathlib import Path

import pytest

import jsp_format.cli as cli_module
from jsp_format.cli import cli

UNFORMATTED = """
<c:if test="${user.admin}">
<br>
Welcome back
</c:if>
"""

FORMATTED = '<c:if test="${user.admin}">\n    <br>\n    Welcome back\n</c:if>\n'


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_cli_prints_formatted_file(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert result.output == FORMATTED
    assert target.read_text(encoding="utf-8") == textwrap.dedent(UNFORMATTED).lstrip()


def test_cli_writes_in_place(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, ["--write", str(target)])

    assert result.exit_code == 0
    assert result.output == ""
    assert target.read_text(encoding="utf-8") == FORMATTED


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions are required")
def test_cli_write_preserves_permissions(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)
    target.chmod(0o640)

    result = cli_runner.invoke(cli, ["-w", str(target)])

    assert result.exit_code == 0
    assert target.stat().st_mode & 0o777 == 0o640


def test_cli_write_leaves_formatted_file_untouched(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "done.jsp"
    target.write_text(FORMATTED, encoding="utf-8")
    before = target.stat().st_mtime_ns

    result = cli_runner.invoke(cli, ["--write", str(target)])

    assert result.exit_code == 0
    assert target.stat().st_mtime_ns == before


def test_cli_check_reports_unformatted_files(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    dirty = write_jsp("dirty.jsp", UNFORMATTED)
    clean = tmp_path / "clean.jsp"
    clean.write_text(FORMATTED, encoding="utf-8")

    result = cli_runner.invoke(cli, ["--check", str(dirty), str(clean)])

    assert result.exit_code == 1
    assert "would reformat dirty.jsp" in result.output
    assert "clean.jsp" not in result.output
    assert dirty.read_text(encoding="utf-8") == textwrap.dedent(UNFORMATTED).lstrip()


def test_cli_check_passes_for_formatted_files(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    clean = tmp_path / "clean.jsp"
    clean.write_text(FORMATTED, encoding="utf-8")

    result = cli_runner.invoke(cli, ["--check", str(clean)])

    assert result.exit_code == 0
    assert result.output == ""


def test_cli_indentation_flags(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)

    tabs = cli_runner.invoke(cli, ["--use-tabs", str(target)])
    narrow = cli_runner.invoke(cli, ["--tab-size", "2", str(target)])

    assert tabs.exit_code == 0
    assert "\n\t<br>\n" in tabs.output
    assert narrow.exit_code == 0
    assert "\n  <br>\n" in narrow.output


def test_cli_blank_line_flags(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "gaps.jsp"
    target.write_text("<p>a</p>\n\n\n\n<p>b</p>\n", encoding="utf-8")

    capped = cli_runner.invoke(cli, ["--max-preserve-newlines", "1", str(target)])
    kept = cli_runner.invoke(
        cli, ["--no-preserve-newlines", "--max-preserve-newlines", "1", str(target)]
    )

    assert capped.output == "<p>a</p>\n\n<p>b</p>\n"
    assert kept.output == "<p>a</p>\n\n\n\n<p>b</p>\n"


def test_cli_reads_config_from_pyproject(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.jsp-format]
        tab_size = 3
        """,
    )
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    assert "\n   <br>\n" in result.output


def test_cli_flags_override_config(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.jsp-format]
        tab_size = 3
        insert_spaces = false
        """,
    )
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, ["--use-spaces", "--tab-size", "2", str(target)])

    assert result.exit_code == 0
    assert "\n  <br>\n" in result.output


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, ["--tab-size", "0", str(target)])

    assert result.exit_code != 0
    assert "`tab_size` must be a positive integer" in result.output


def test_cli_rejects_non_jsp_files(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("notes.txt", UNFORMATTED)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "not a JSP file" in result.output


def test_cli_rejects_paths_outside_working_directory(cli_runner, tmp_path, monkeypatch):
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    outside = tmp_path / f"outside-{uuid.uuid4().hex}.jsp"
    outside.write_text(FORMATTED, encoding="utf-8")

    result = cli_runner.invoke(cli, [str(outside)])

    assert result.exit_code != 0
    assert "outside of the working directory" in result.output


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlink support is required")
def test_cli_rejects_symlinks(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    source = write_jsp("source.jsp", UNFORMATTED)
    link = tmp_path / "alias.jsp"
    try:
        os.symlink(source, link, target_is_directory=False)
    except OSError as error:  # pragma: no cover - platform dependent
        pytest.skip(f"Unable to create symlink: {error}")

    result = cli_runner.invoke(cli, [str(link)])

    assert result.exit_code != 0
    assert "Symlinks" in result.output


def test_cli_enforces_file_size_limit(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JSP_FORMAT_MAX_FILE_SIZE", "10")
    target = write_jsp("large.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "maximum allowed size" in result.output


def test_cli_rejects_invalid_file_size_env(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("JSP_FORMAT_MAX_FILE_SIZE", "lots")
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "JSP_FORMAT_MAX_FILE_SIZE" in result.output


def test_cli_rejects_invalid_utf8(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "broken.jsp"
    target.write_bytes(b"<div>\xff\xfe</div>\n")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code != 0
    assert "Invalid UTF-8" in result.output


def test_cli_keeps_crlf_line_endings(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "windows.jsp"
    target.write_bytes(b"<div>\r\ntext\r\n</div>\r\n")

    result = cli_runner.invoke(cli, ["--write", str(target)])

    assert result.exit_code == 0
    assert target.read_bytes() == b"<div>\r\n    text\r\n</div>\r\n"


def test_cli_verbose_logs_to_stderr(cli_runner, tmp_path, monkeypatch, write_jsp):
    monkeypatch.chdir(tmp_path)
    target = write_jsp("index.jsp", UNFORMATTED)

    result = cli_runner.invoke(cli, ["--verbose", str(target)])

    assert result.exit_code == 0
    assert FORMATTED in result.output


def test_cli_public_api():
    assert cli_module.__all__ == ["cli"]
