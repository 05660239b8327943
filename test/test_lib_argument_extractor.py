#!/usr/bin/env python3
"""Tests for cmakeimport/argument_extractor.py"""

import os

import pytest

from cmakeimport.argument_extractor import (
    LibraryArguments,
    extract_defines,
    extract_includes,
    extract_libs,
    find_linker_script_arguments,
    take_flag_value,
)

ROOT = "/work/fw"
BUILD = "/work/fw/build"


class TestTakeFlagValue:
    """Tests for take_flag_value function."""

    def test_attached(self) -> None:
        assert take_flag_value(["-Iinc", "x"], 0, "-I") == ("inc", 0)

    def test_separate(self) -> None:
        assert take_flag_value(["-I", "inc", "x"], 0, "-I") == ("inc", 1)

    def test_missing_value(self) -> None:
        assert take_flag_value(["gcc", "-I"], 1, "-I") == (None, 1)


@pytest.mark.skipif(os.name == "nt", reason="POSIX paths")
class TestExtractIncludes:
    """Tests for extract_includes function."""

    def test_all_forms_are_equivalent(self) -> None:
        """Test that the attached, separate and long forms give the same path."""
        forms = [
            ["-I../Core/Inc"],
            ["-I", "../Core/Inc"],
            ["--include-directory=../Core/Inc"],
            ["-isystem", "../Core/Inc"],
        ]
        results = [extract_includes(["gcc"] + form + ["-c", "x.c"], BUILD, ROOT) for form in forms]

        assert all(result == ["Core/Inc"] for result in results)

    def test_order_preserved(self) -> None:
        args = ["gcc", "-Ib", "-I", "a", "-isystem", "/opt/sys", "-Ic"]

        assert extract_includes(args, ROOT, ROOT) == ["b", "a", "/opt/sys", "c"]

    def test_duplicates_kept(self) -> None:
        """Test that deduplication is left to the caller."""
        assert extract_includes(["-Ia", "-Ia"], ROOT, ROOT) == ["a", "a"]

    def test_trailing_flag_without_value(self) -> None:
        assert extract_includes(["gcc", "-I"], ROOT, ROOT) == []
        assert extract_includes(["gcc", "-isystem"], ROOT, ROOT) == []

    def test_separate_value_not_reinterpreted(self) -> None:
        """Test that a consumed value is not parsed as a flag again."""
        assert extract_includes(["-I", "-Iweird"], ROOT, ROOT) == ["-Iweird"]

    def test_empty_long_form_skipped(self) -> None:
        assert extract_includes(["--include-directory="], ROOT, ROOT) == []

    def test_unrelated_flags_ignored(self) -> None:
        assert extract_includes(["gcc", "-O2", "-isysroot", "/sdk", "-c", "x.c"], ROOT, ROOT) == []


class TestExtractDefines:
    """Tests for extract_defines function."""

    def test_all_forms(self) -> None:
        args = ["gcc", "-DA", "-D", "B=2", "--define=C=three", "-c", "x.c"]

        assert extract_defines(args) == ["A", "B=2", "C=three"]

    def test_value_kept_verbatim(self) -> None:
        assert extract_defines(['-DMSG="hello world"']) == ['MSG="hello world"']

    def test_trailing_flag_without_value(self) -> None:
        assert extract_defines(["gcc", "-D"]) == []

    def test_empty_long_form_skipped(self) -> None:
        assert extract_defines(["--define="]) == []

    def test_undefine_ignored(self) -> None:
        assert extract_defines(["-UNDEBUG", "-DDEBUG"]) == ["DEBUG"]


@pytest.mark.skipif(os.name == "nt", reason="POSIX paths")
class TestExtractLibs:
    """Tests for extract_libs function."""

    def test_paths_and_names(self) -> None:
        args = ["gcc", "-L../lib", "-L", "/opt/sdk/lib", "-lm", "-lnosys", "-o", "fw.elf"]

        result = extract_libs(args, BUILD, ROOT)

        assert result == LibraryArguments(lib_paths=["lib", "/opt/sdk/lib"], libs=["m", "nosys"])

    def test_separate_library_name_not_supported(self) -> None:
        """Test that '-l name' is not treated as a library."""
        result = extract_libs(["-l", "m"], BUILD, ROOT)

        assert result.libs == []

    def test_trailing_lib_path_flag(self) -> None:
        assert extract_libs(["gcc", "-L"], BUILD, ROOT).lib_paths == []

    def test_no_libraries(self) -> None:
        assert extract_libs(["gcc", "-c", "x.c"], BUILD, ROOT) == LibraryArguments()


class TestFindLinkerScriptArguments:
    """Tests for find_linker_script_arguments function."""

    def test_forms(self) -> None:
        args = ["gcc", "-TSTM32F407VGTx_FLASH.ld", "-T", "../other.ld", "-o", "fw.elf"]

        assert find_linker_script_arguments(args) == ["STM32F407VGTx_FLASH.ld", "../other.ld"]

    def test_none(self) -> None:
        assert find_linker_script_arguments(["gcc", "-o", "fw.elf"]) == []

    def test_trailing_flag(self) -> None:
        assert find_linker_script_arguments(["gcc", "-T"]) == []
