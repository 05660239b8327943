#!/usr/bin/env python3
"""Tests for cmakeimport/command_utils.py"""

import os
from pathlib import Path

import pytest

from cmakeimport.command_utils import expand_response_files, read_response_file, split_command
from cmakeimport.constants import CHANNEL_ERROR, CHANNEL_LOG
from cmakeimport.diagnostics import CollectingSink


class TestSplitCommand:
    """Tests for split_command function."""

    def test_double_quotes_group_whitespace(self) -> None:
        """Test that a double-quoted span becomes one argument."""
        assert split_command('a "b c" d') == ["a", "b c", "d"]

    def test_single_quotes_group_whitespace(self) -> None:
        """Test that a single-quoted span becomes one argument."""
        assert split_command("gcc '-DNAME=hello world' -c x.c") == ["gcc", "-DNAME=hello world", "-c", "x.c"]

    def test_whitespace_runs_produce_no_empty_args(self) -> None:
        """Test tabs, newlines and repeated spaces."""
        assert split_command("  gcc\t-c \r\n  main.c   ") == ["gcc", "-c", "main.c"]

    def test_empty_string(self) -> None:
        """Test empty and whitespace-only input."""
        assert split_command("") == []
        assert split_command("   \t ") == []

    def test_empty_quotes_produce_no_argument(self) -> None:
        """Test that an empty quoted string alone is dropped."""
        assert split_command('gcc "" -c') == ["gcc", "-c"]

    def test_quote_joins_adjacent_text(self) -> None:
        """Test quoted text glued to unquoted text."""
        assert split_command('-I"/opt/my dir/include"') == ["-I/opt/my dir/include"]

    def test_escaped_quote_outside_quotes(self) -> None:
        """Test backslash escapes outside quotes."""
        assert split_command(r"-DNAME=\"x\"") == ['-DNAME="x"']

    def test_escaped_space_outside_quotes(self) -> None:
        """Test that an escaped space does not split."""
        assert split_command(r"path\ with\ space") == ["path with space"]

    def test_escaped_quote_inside_quotes(self) -> None:
        """Test escaping the active quote inside a quoted span."""
        assert split_command(r'"-DMSG=\"hi\""') == ['-DMSG="hi"']

    def test_other_backslash_inside_quotes_kept(self) -> None:
        """Test that Windows paths survive inside quotes."""
        assert split_command(r'"C:\tools\gcc.exe" -c') == [r"C:\tools\gcc.exe", "-c"]

    def test_other_quote_inside_quotes_is_literal(self) -> None:
        """Test a single quote inside double quotes."""
        assert split_command("\"it's\"") == ["it's"]

    def test_unterminated_quote_runs_to_end(self) -> None:
        """Test that an unterminated quote never raises."""
        assert split_command('gcc "-DX=1 -c') == ["gcc", "-DX=1 -c"]

    def test_trailing_backslash(self) -> None:
        """Test a dangling backslash at the end of input."""
        assert split_command("gcc \\") == ["gcc"]


class TestReadResponseFile:
    """Tests for read_response_file function."""

    def test_relative_path(self, temp_dir: str) -> None:
        """Test that relative paths resolve against the base directory."""
        Path(temp_dir, "args.rsp").write_text("-DA=1\n-Iinc\r\n-c\n")

        assert read_response_file("args.rsp", temp_dir) == ["-DA=1", "-Iinc", "-c"]

    def test_absolute_path(self, temp_dir: str) -> None:
        """Test an absolute response file path."""
        rsp = os.path.join(temp_dir, "abs.rsp")
        Path(rsp).write_text('-I"/opt/sdk dir/include"')

        assert read_response_file(rsp, "/nonexistent") == ["-I/opt/sdk dir/include"]

    def test_missing_file_returns_none(self, temp_dir: str) -> None:
        """Test that a missing file yields None."""
        assert read_response_file("missing.rsp", temp_dir) is None


class TestExpandResponseFiles:
    """Tests for expand_response_files function."""

    def test_no_response_files(self, collecting_sink: CollectingSink) -> None:
        """Test arguments without '@' pass through unchanged."""
        args = ["gcc", "-c", "main.c"]

        assert expand_response_files(args, "/build", collecting_sink) == args
        assert collecting_sink.events == []

    def test_expansion_is_equivalent_to_inline(self, temp_dir: str) -> None:
        """Test that a response file behaves like its content written inline."""
        Path(temp_dir, "flags.rsp").write_text("-DUSE_HAL_DRIVER\n-I../Core/Inc\n")

        expanded = expand_response_files(["gcc", "@flags.rsp", "-c", "main.c"], temp_dir)
        inline = split_command("gcc -DUSE_HAL_DRIVER -I../Core/Inc -c main.c")

        assert expanded == inline

    def test_progress_message(self, temp_dir: str, collecting_sink: CollectingSink) -> None:
        """Test that every response file is announced on the log channel."""
        Path(temp_dir, "a.rsp").write_text("-DA")

        expand_response_files(["gcc", "@a.rsp"], temp_dir, collecting_sink)

        assert collecting_sink.messages(CHANNEL_LOG) == ["Parsing response file: a.rsp"]

    def test_unreadable_file_reports_and_continues(self, temp_dir: str, collecting_sink: CollectingSink) -> None:
        """Test that a missing response file is dropped and reported."""
        result = expand_response_files(["gcc", "@missing.rsp", "-DB"], temp_dir, collecting_sink)

        assert result == ["gcc", "-DB"]
        assert collecting_sink.messages(CHANNEL_ERROR) == ["Failed to read response file: missing.rsp"]

    def test_nested_response_files_not_expanded(self, temp_dir: str) -> None:
        """Test that '@' arguments inside a response file are kept verbatim."""
        Path(temp_dir, "outer.rsp").write_text("-DOUTER @inner.rsp")
        Path(temp_dir, "inner.rsp").write_text("-DINNER")

        assert expand_response_files(["@outer.rsp"], temp_dir) == ["-DOUTER", "@inner.rsp"]

    def test_without_sink(self, temp_dir: str) -> None:
        """Test that a missing sink is allowed."""
        assert expand_response_files(["@missing.rsp"], temp_dir, None) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
