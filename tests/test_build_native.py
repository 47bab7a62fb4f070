"""Tests for the native library build script."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

import build_native  # noqa: E402


class TestCompileCommand:

    def test_linux(self):
        cmd = build_native.compile_command("cc", Path("/src/unqlite.c"), Path("/out/libunqlite.so"), "linux")
        assert cmd[0] == "cc"
        assert "-shared" in cmd and "-fPIC" in cmd and "-O2" in cmd
        assert cmd[cmd.index("-o") + 1] == str(Path("/out/libunqlite.so"))
        assert cmd[-1] == "-lpthread"

    def test_darwin_debug(self):
        cmd = build_native.compile_command("clang", Path("u.c"), Path("libunqlite.dylib"), "darwin", release=False)
        assert "-dynamiclib" in cmd
        assert "-g" in cmd and "-O2" not in cmd
        assert "-lpthread" not in cmd


class TestHelpers:

    def test_compiler_from_env(self, monkeypatch):
        monkeypatch.setenv("CC", "my-cc")
        assert build_native.find_compiler() == "my-cc"

    def test_no_compiler(self, monkeypatch):
        monkeypatch.delenv("CC", raising=False)
        monkeypatch.setattr(build_native.shutil, "which", lambda name: None)
        with pytest.raises(RuntimeError):
            build_native.find_compiler()

    def test_missing_source(self, tmp_path):
        with pytest.raises(RuntimeError):
            build_native.build_library(tmp_path / "unqlite.c")

    def test_source_required(self, monkeypatch):
        monkeypatch.delenv("UNQLITE_SRC", raising=False)
        with pytest.raises(SystemExit):
            build_native.main([])

    def test_install_library(self, monkeypatch, tmp_path):
        monkeypatch.setattr(build_native, "PKG_DIR", tmp_path / "pkg")
        built = tmp_path / "libunqlite.so"
        built.write_bytes(b"\x7fELF")
        dest = build_native.install_library(built, "linux-x86_64")
        assert dest == tmp_path / "pkg" / "lib" / "linux-x86_64" / "libunqlite.so"
        assert dest.read_bytes() == b"\x7fELF"

        build_native.clean()
        assert not (tmp_path / "pkg" / "lib").exists()
