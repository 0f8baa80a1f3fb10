"""
Tests for the symlink / permission helper.
"""

import os
from pathlib import Path

import pytest

from idt.core.errors import LinkError, SourceMissing
from idt.core.services.tool_install.execution.symlink import (
    chmod_x,
    is_executable,
    link,
    remove_dead_symlinks,
    write_wrapper,
)


def _file(path: Path, mode: int = 0o644) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    os.chmod(path, mode)
    return path


class TestLinkFile:
    def test_creates_executable_link(self, tmp_path: Path):
        source = _file(tmp_path / "pkg" / "tool")
        dest = tmp_path / "bin" / "tool"

        outcome = link(source, dest)

        assert dest.is_symlink()
        assert Path(os.readlink(dest)) == source.absolute()
        assert is_executable(dest)
        assert outcome.created == [dest]
        assert outcome.unchanged == []

    def test_replaces_existing_file(self, tmp_path: Path):
        source = _file(tmp_path / "pkg" / "tool")
        dest = _file(tmp_path / "bin" / "tool")

        link(source, dest)

        assert dest.is_symlink()
        assert dest.resolve() == source.resolve()

    def test_replaces_link_to_elsewhere(self, tmp_path: Path):
        old = _file(tmp_path / "old" / "tool")
        new = _file(tmp_path / "new" / "tool")
        dest = tmp_path / "bin" / "tool"
        link(old, dest)

        outcome = link(new, dest)

        assert dest.resolve() == new.resolve()
        assert outcome.created == [dest]

    def test_idempotent(self, tmp_path: Path):
        source = _file(tmp_path / "pkg" / "tool")
        dest = tmp_path / "bin" / "tool"

        link(source, dest)
        outcome = link(source, dest)

        assert outcome.created == []
        assert outcome.unchanged == [dest]
        assert sorted(p.name for p in dest.parent.iterdir()) == ["tool"]

    def test_into_existing_directory(self, tmp_path: Path):
        source = _file(tmp_path / "pkg" / "tool")
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()

        link(source, bin_dir)

        assert (bin_dir / "tool").is_symlink()

    def test_missing_source_touches_nothing(self, tmp_path: Path):
        dest = _file(tmp_path / "bin" / "tool")
        with pytest.raises(SourceMissing) as exc:
            link(tmp_path / "nope", dest)
        assert exc.value.kind == "source_missing"
        assert not dest.is_symlink()

    def test_refuses_to_replace_real_directory(self, tmp_path: Path):
        source = _file(tmp_path / "pkg" / "tool")
        blocker = tmp_path / "bin" / "tool"
        blocker.mkdir(parents=True)
        with pytest.raises(LinkError, match="Refusing"):
            link(source, tmp_path / "bin")
        assert blocker.is_dir()


class TestLinkDirectory:
    def test_links_every_file(self, tmp_path: Path):
        source = tmp_path / "node_modules" / ".bin"
        for name in ("a", "b", "c"):
            _file(source / name)
        (source / "nested").mkdir()
        dest = tmp_path / "bin"

        outcome = link(source, dest)

        assert sorted(p.name for p in dest.iterdir()) == ["a", "b", "c"]
        assert all(is_executable(dest / name) for name in ("a", "b", "c"))
        assert len(outcome.created) == 3

    def test_second_run_is_noop(self, tmp_path: Path):
        source = tmp_path / "src"
        for name in ("a", "b"):
            _file(source / name)
        dest = tmp_path / "bin"

        link(source, dest)
        outcome = link(source, dest)

        assert outcome.created == []
        assert len(outcome.links) == 2


class TestWriteWrapper:
    def test_writes_exec_script(self, tmp_path: Path):
        source = _file(tmp_path / "luals" / "bin" / "lua-language-server")
        dest = tmp_path / "bin" / "lua-language-server"

        assert write_wrapper(source, dest) is True

        assert not dest.is_symlink()
        assert dest.read_text() == f'#!/bin/sh\nexec "{source.absolute()}" "$@"\n'
        assert is_executable(dest)
        assert is_executable(source)

    def test_second_run_is_noop(self, tmp_path: Path):
        source = _file(tmp_path / "luals" / "lua-language-server")
        dest = tmp_path / "bin" / "lua-language-server"
        write_wrapper(source, dest)

        assert write_wrapper(source, dest) is False

    def test_replaces_old_symlink(self, tmp_path: Path):
        source = _file(tmp_path / "luals" / "lua-language-server")
        dest = tmp_path / "bin" / "lua-language-server"
        link(source, dest)

        write_wrapper(source, dest)

        assert not dest.is_symlink()
        assert "exec" in dest.read_text()

    def test_missing_source(self, tmp_path: Path):
        with pytest.raises(SourceMissing):
            write_wrapper(tmp_path / "nope", tmp_path / "bin" / "nope")
        assert not (tmp_path / "bin").exists()

    def test_refuses_directory(self, tmp_path: Path):
        source = _file(tmp_path / "luals" / "tool")
        (tmp_path / "bin" / "tool").mkdir(parents=True)
        with pytest.raises(LinkError, match="Refusing"):
            write_wrapper(source, tmp_path / "bin" / "tool")


class TestChmodX:
    def test_adds_exec_bits(self, tmp_path: Path):
        path = _file(tmp_path / "tool", 0o600)
        chmod_x(path)
        assert os.stat(path).st_mode & 0o111 == 0o111
        assert os.stat(path).st_mode & 0o600 == 0o600

    def test_missing(self, tmp_path: Path):
        with pytest.raises(SourceMissing):
            chmod_x(tmp_path / "nope")


class TestRemoveDeadSymlinks:
    def test_prunes_only_dangling(self, tmp_path: Path):
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        alive = _file(tmp_path / "alive")
        (bin_dir / "alive").symlink_to(alive)
        (bin_dir / "dead").symlink_to(tmp_path / "gone")
        _file(bin_dir / "plain")

        removed = remove_dead_symlinks(bin_dir)

        assert removed == [bin_dir / "dead"]
        assert sorted(p.name for p in bin_dir.iterdir()) == ["alive", "plain"]

    def test_missing_directory(self, tmp_path: Path):
        assert remove_dead_symlinks(tmp_path / "nope") == []
