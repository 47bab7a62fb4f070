#!/usr/bin/env python3
"""
Build script for the unqlitekv native library.

This script:
1. Compiles the UnQLite amalgamation (unqlite.c) into a shared library
   for the current platform
2. Copies the library to src/unqlitekv/lib/<platform>/, where the package
   finds it at runtime

Usage:
    python build_native.py --source path/to/unqlite.c   # Build for current platform
    python build_native.py --debug --source unqlite.c   # Unoptimized build with symbols
    python build_native.py --clean                      # Remove the bundled library

The source may also be given with the UNQLITE_SRC environment variable.
"""

from __future__ import annotations

import argparse
import os
import platform
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

PKG_DIR = Path(__file__).parent / "src" / "unqlitekv"

LIB_NAMES = {
    "darwin": "libunqlite.dylib",
    "linux": "libunqlite.so",
    "windows": "unqlite.dll",
}


def get_platform_dir() -> str:
    """Get the platform directory name for the current system."""
    system = platform.system().lower()
    machine = platform.machine().lower()

    # Normalize machine names
    if machine in ("x86_64", "amd64"):
        machine = "x86_64"
    elif machine in ("arm64", "aarch64"):
        machine = "aarch64"

    return f"{system}-{machine}"


def get_os_name() -> str:
    """Get normalized OS name."""
    system = platform.system().lower()
    if system == "darwin":
        return "darwin"
    elif system.startswith("linux"):
        return "linux"
    elif system.startswith(("win", "mingw", "msys", "cygwin")):
        return "windows"
    return system


def find_compiler() -> str:
    """Pick a C compiler: $CC, then cc, gcc, clang."""
    env_cc = os.environ.get("CC")
    if env_cc:
        return env_cc
    for cc in ("cc", "gcc", "clang"):
        if shutil.which(cc):
            return cc
    raise RuntimeError("No C compiler found. Install gcc or clang, or set CC.")


def compile_command(compiler: str, source: Path, output: Path, os_name: str, release: bool = True) -> list[str]:
    """Command line that compiles ``source`` into the shared library ``output``."""
    cmd = [compiler]
    cmd.append("-O2" if release else "-g")
    if os_name == "darwin":
        cmd.append("-dynamiclib")
    else:
        cmd.extend(["-shared", "-fPIC"])
    # The engine is thread-safe only when built with threading enabled
    cmd.append("-DUNQLITE_ENABLE_THREADS=1")
    cmd.extend(["-o", str(output), str(source)])
    if os_name == "linux":
        cmd.append("-lpthread")
    return cmd


def build_library(source: Path, release: bool = True) -> Path:
    """Compile the amalgamation into a temporary directory."""
    if not source.exists():
        raise RuntimeError(f"UnQLite source not found: {source}")

    os_name = get_os_name()
    lib_name = LIB_NAMES.get(os_name)
    if lib_name is None:
        raise RuntimeError(f"Unsupported platform: {os_name}")

    out_dir = Path(tempfile.mkdtemp(prefix="unqlitekv-build-"))
    output = out_dir / lib_name
    cmd = compile_command(find_compiler(), source, output, os_name, release)

    print(f"Building {lib_name}: {' '.join(cmd)}")
    subprocess.run(cmd, cwd=source.parent, check=True)

    if not output.exists():
        raise RuntimeError(f"Library not found: {output}")
    return output


def install_library(lib_path: Path, target_platform: str | None = None) -> Path:
    """Install the library to the package lib directory."""
    if target_platform is None:
        target_platform = get_platform_dir()

    dest_dir = PKG_DIR / "lib" / target_platform
    dest_dir.mkdir(parents=True, exist_ok=True)

    dest_path = dest_dir / lib_path.name
    print(f"Installing library: {lib_path} -> {dest_path}")
    shutil.copy2(lib_path, dest_path)

    # Make executable on Unix (shared libs need this)
    if platform.system() != "Windows":
        os.chmod(dest_path, 0o755)

    return dest_path


def clean() -> None:
    """Remove the bundled library."""
    lib_dir = PKG_DIR / "lib"
    if lib_dir.exists():
        print(f"Removing: {lib_dir}")
        shutil.rmtree(lib_dir)

    print("✓ Cleaned bundled libraries")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Build the UnQLite shared library for unqlitekv")
    parser.add_argument("--source", help="Path to unqlite.c (default: $UNQLITE_SRC)")
    parser.add_argument("--clean", action="store_true", help="Remove the bundled library")
    parser.add_argument("--debug", action="store_true", help="Build debug instead of release")

    args = parser.parse_args(argv)

    if args.clean:
        clean()
        return 0

    source = args.source or os.environ.get("UNQLITE_SRC")
    if not source:
        parser.error("--source or UNQLITE_SRC is required")

    lib = build_library(Path(source).resolve(), release=not args.debug)
    install_library(lib)
    print(f"\n✓ Build complete for {get_platform_dir()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
