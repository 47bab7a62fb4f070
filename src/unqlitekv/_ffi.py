# Copyright 2025 Sushanth (https://github.com/sushanthpy)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
ctypes bindings to the UnQLite shared library.
"""

import os
import sys
import ctypes
import ctypes.util
import logging
import platform
from typing import Optional, List

from .errors import LibraryNotFoundError

logger = logging.getLogger(__name__)

# Configuration verb for unqlite_config()
UNQLITE_CONFIG_DISABLE_AUTO_COMMIT = 5


def get_platform_dir() -> str:
    """Get the bundled-library directory name for the current platform."""
    system = platform.system().lower()
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64"):
        machine = "x86_64"
    elif machine in ("arm64", "aarch64"):
        machine = "aarch64"

    return f"{system}-{machine}"


def get_library_name() -> str:
    """Platform-specific file name of the UnQLite shared library."""
    if sys.platform == "darwin":
        return "libunqlite.dylib"
    elif sys.platform == "win32":
        return "unqlite.dll"
    return "libunqlite.so"


def library_search_paths(lib_path: Optional[str] = None) -> List[str]:
    """
    Directories searched for the shared library, in priority order:

    1. Explicit ``lib_path`` (UNQLITEKV_LIB_PATH)
    2. Bundled library (lib/<platform>/), as laid down by build_native.py
    3. Bundled library (lib/)
    4. Package directory
    5. System paths (/usr/local/lib, /usr/lib)
    """
    pkg_dir = os.path.dirname(__file__)

    search_paths = []
    if lib_path:
        search_paths.append(lib_path)
    search_paths.append(os.path.join(pkg_dir, "lib", get_platform_dir()))
    search_paths.append(os.path.join(pkg_dir, "lib"))
    search_paths.append(pkg_dir)
    search_paths.extend(["/usr/local/lib", "/usr/lib"])
    return search_paths


def find_library(lib_path: Optional[str] = None) -> str:
    """Locate the UnQLite shared library or raise LibraryNotFoundError."""
    lib_name = get_library_name()
    search_paths = library_search_paths(lib_path)

    for path in search_paths:
        candidate = os.path.join(path, lib_name)
        if os.path.exists(candidate):
            return candidate

    # Fall back to the dynamic loader's own lookup
    found = ctypes.util.find_library("unqlite")
    if found:
        return found

    raise LibraryNotFoundError(lib_name, search_paths)


class _FFI:
    """FFI bindings to the native library, loaded once per process."""

    _lib = None
    _lib_path = None

    @classmethod
    def get_lib(cls, lib_path: Optional[str] = None):
        if cls._lib is None:
            path = find_library(lib_path)
            try:
                cls._lib = ctypes.CDLL(path)
            except OSError as e:
                raise LibraryNotFoundError(path, [path]) from e
            cls._lib_path = path
            cls._setup_bindings()
            logger.debug("Loaded UnQLite from %s", path)
        return cls._lib

    @classmethod
    def _setup_bindings(cls):
        """Set up function signatures for the native library."""
        lib = cls._lib
        db_p = ctypes.c_void_p
        cur_p = ctypes.c_void_p

        # Database lifecycle
        # unqlite_open(unqlite **ppDB, const char *zFilename, unsigned int iMode) -> int
        lib.unqlite_open.argtypes = [ctypes.POINTER(db_p), ctypes.c_char_p, ctypes.c_uint]
        lib.unqlite_open.restype = ctypes.c_int

        # unqlite_close(unqlite *pDb) -> int
        lib.unqlite_close.argtypes = [db_p]
        lib.unqlite_close.restype = ctypes.c_int

        # unqlite_config(unqlite *pDb, int nOp, ...) -> int
        # Only the fixed parameters are declared; ctypes passes any extra
        # arguments with the variadic calling convention.
        lib.unqlite_config.argtypes = [db_p, ctypes.c_int]
        lib.unqlite_config.restype = ctypes.c_int

        # Key-Value API
        # unqlite_kv_store(pDb, pKey, nKeyLen, pData, nDataLen: unqlite_int64) -> int
        for name in ("unqlite_kv_store", "unqlite_kv_append"):
            fn = getattr(lib, name)
            fn.argtypes = [
                db_p,
                ctypes.c_char_p, ctypes.c_int,
                ctypes.c_char_p, ctypes.c_int64,
            ]
            fn.restype = ctypes.c_int

        # unqlite_kv_fetch(pDb, pKey, nKeyLen, pBuf, pBufLen: *unqlite_int64) -> int
        lib.unqlite_kv_fetch.argtypes = [
            db_p,
            ctypes.c_char_p, ctypes.c_int,
            ctypes.c_void_p, ctypes.POINTER(ctypes.c_int64),
        ]
        lib.unqlite_kv_fetch.restype = ctypes.c_int

        # unqlite_kv_delete(pDb, pKey, nKeyLen) -> int
        lib.unqlite_kv_delete.argtypes = [db_p, ctypes.c_char_p, ctypes.c_int]
        lib.unqlite_kv_delete.restype = ctypes.c_int

        # Transaction API
        for name in ("unqlite_begin", "unqlite_commit", "unqlite_rollback"):
            fn = getattr(lib, name)
            fn.argtypes = [db_p]
            fn.restype = ctypes.c_int

        # Cursor API
        # unqlite_kv_cursor_init(pDb, unqlite_kv_cursor **ppOut) -> int
        lib.unqlite_kv_cursor_init.argtypes = [db_p, ctypes.POINTER(cur_p)]
        lib.unqlite_kv_cursor_init.restype = ctypes.c_int

        # unqlite_kv_cursor_release(pDb, pCur) -> int
        lib.unqlite_kv_cursor_release.argtypes = [db_p, cur_p]
        lib.unqlite_kv_cursor_release.restype = ctypes.c_int

        # unqlite_kv_cursor_seek(pCur, pKey, nKeyLen, iPos) -> int
        lib.unqlite_kv_cursor_seek.argtypes = [cur_p, ctypes.c_char_p, ctypes.c_int, ctypes.c_int]
        lib.unqlite_kv_cursor_seek.restype = ctypes.c_int

        for name in (
            "unqlite_kv_cursor_reset",
            "unqlite_kv_cursor_first_entry",
            "unqlite_kv_cursor_last_entry",
            "unqlite_kv_cursor_next_entry",
            "unqlite_kv_cursor_prev_entry",
            "unqlite_kv_cursor_valid_entry",
            "unqlite_kv_cursor_delete_entry",
        ):
            fn = getattr(lib, name)
            fn.argtypes = [cur_p]
            fn.restype = ctypes.c_int

        # unqlite_kv_cursor_key(pCur, pBuf, int *pnByte) -> int
        lib.unqlite_kv_cursor_key.argtypes = [cur_p, ctypes.c_void_p, ctypes.POINTER(ctypes.c_int)]
        lib.unqlite_kv_cursor_key.restype = ctypes.c_int

        # unqlite_kv_cursor_data(pCur, pBuf, unqlite_int64 *pnData) -> int
        lib.unqlite_kv_cursor_data.argtypes = [cur_p, ctypes.c_void_p, ctypes.POINTER(ctypes.c_int64)]
        lib.unqlite_kv_cursor_data.restype = ctypes.c_int
