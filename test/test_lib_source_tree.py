#!/usr/bin/env python3
"""Tests for cmakeimport/source_tree.py"""

import pytest

from cmakeimport.constants import VIRTUAL_ROOT_NAME
from cmakeimport.source_tree import (
    VirtualFile,
    VirtualFolder,
    build_virtual_tree,
    group_by_directory,
    is_compilable_source,
)


class TestIsCompilableSource:
    """Tests for is_compilable_source function."""

    @pytest.mark.parametrize(
        "path",
        ["main.c", "a.cc", "b.cpp", "c.cxx", "d.c++", "boot.asm", "startup.s", "startup.S", "MAIN.C", "Lib.CPP", "x.ASM"],
    )
    def test_sources(self, path: str) -> None:
        assert is_compilable_source(path)

    @pytest.mark.parametrize(
        "path",
        ["main.h", "a.hpp", "b.hh", "c.hxx", "regs.inc", "MAIN.H", "README", "fw.ld", "data.bin", "Makefile", "archive.a"],
    )
    def test_non_sources(self, path: str) -> None:
        assert not is_compilable_source(path)

    def test_directory_with_dot(self) -> None:
        """Test that only the file extension is considered."""
        assert not is_compilable_source("lib.c/README")
        assert is_compilable_source("v1.2/src/main.c")


class TestGroupByDirectory:
    """Tests for group_by_directory function."""

    def test_grouping_keeps_first_appearance_order(self) -> None:
        files = ["src/b.c", "main.c", "src/a.c", "drv/x.c"]

        groups = group_by_directory(files)

        assert list(groups.keys()) == ["src", "", "drv"]
        assert groups["src"] == ["src/b.c", "src/a.c"]
        assert groups[""] == ["main.c"]

    def test_backslashes(self) -> None:
        assert dict(group_by_directory([r"Core\Src\main.c"])) == {"Core/Src": [r"Core\Src\main.c"]}


class TestBuildVirtualTree:
    """Tests for build_virtual_tree function."""

    def test_example_layout(self) -> None:
        """Test the root, a nested folder and a deeper folder."""
        tree = build_virtual_tree(["main.c", "src/a.c", "src/drv/b.c"])

        assert tree.name == VIRTUAL_ROOT_NAME
        assert tree.files == [VirtualFile("main.c")]
        assert [f.name for f in tree.folders] == ["src"]

        src = tree.folders[0]
        assert src.files == [VirtualFile("src/a.c")]
        assert [f.name for f in src.folders] == ["drv"]
        assert src.folders[0].files == [VirtualFile("src/drv/b.c")]

    def test_every_file_exactly_once(self) -> None:
        files = ["Core/Src/main.c", "Core/Src/it.c", "Drivers/HAL/Src/gpio.c", "startup.s", "Core/Startup/boot.s"]

        tree = build_virtual_tree(files)

        assert sorted(f.path for f in tree.iter_files()) == sorted(files)

    def test_sibling_folders_are_shared(self) -> None:
        """Test that no folder has two children with the same name."""
        tree = build_virtual_tree(["a/x/1.c", "a/y/2.c", "a/x/3.c"])

        assert [f.name for f in tree.folders] == ["a"]
        assert [f.name for f in tree.folders[0].folders] == ["x", "y"]
        assert [f.path for f in tree.folders[0].folders[0].files] == ["a/x/1.c", "a/x/3.c"]

    def test_absolute_paths(self) -> None:
        """Test files outside the project root hang below a '/' folder."""
        tree = build_virtual_tree(["/opt/sdk/src/sdk.c"])

        assert [f.name for f in tree.folders] == ["/"]
        assert [f.name for f in tree.folders[0].folders] == ["opt"]
        assert list(tree.iter_files()) == [VirtualFile("/opt/sdk/src/sdk.c")]

    def test_absolute_and_relative_folders_stay_apart(self) -> None:
        tree = build_virtual_tree(["other/in_root.c", "/other/outside.c"])

        assert len(tree.folders) == 2
        inside, outside = tree.folders
        assert inside.name == "other"
        assert inside.files == [VirtualFile("other/in_root.c")]
        assert outside.name == "/"
        assert outside.folders[0].name == "other"
        assert outside.folders[0].files == [VirtualFile("/other/outside.c")]

    def test_doubled_slashes(self) -> None:
        tree = build_virtual_tree(["src//a.c"])

        assert [f.name for f in tree.folders] == ["src"]

    def test_drive_letter(self) -> None:
        tree = build_virtual_tree(["C:\\sdk\\hal.c"])

        assert [f.name for f in tree.folders] == ["C:"]
        assert tree.folders[0].folders[0].files == [VirtualFile("C:\\sdk\\hal.c")]

    def test_empty(self) -> None:
        tree = build_virtual_tree([])

        assert tree == VirtualFolder(name=VIRTUAL_ROOT_NAME)

    def test_custom_root_name(self) -> None:
        assert build_virtual_tree(["a.c"], root_name="fw").name == "fw"

    def test_to_dict(self) -> None:
        tree = build_virtual_tree(["main.c", "src/a.c"])

        assert tree.to_dict() == {
            "name": VIRTUAL_ROOT_NAME,
            "files": [{"path": "main.c"}],
            "folders": [{"name": "src", "files": [{"path": "src/a.c"}], "folders": []}],
        }


class TestVirtualFolder:
    """Tests for VirtualFolder methods."""

    def test_get_or_create_folder(self) -> None:
        root = VirtualFolder(name="root")

        first = root.get_or_create_folder("src")
        second = root.get_or_create_folder("src")

        assert first is second
        assert len(root.folders) == 1

    def test_names_are_case_sensitive(self) -> None:
        root = VirtualFolder(name="root")
        root.get_or_create_folder("Src")
        root.get_or_create_folder("src")

        assert [f.name for f in root.folders] == ["Src", "src"]
