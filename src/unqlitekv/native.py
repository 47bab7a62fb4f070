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
UnQLite engine via FFI.

Direct calls into libunqlite. Reads use the engine's two-call protocol:
the first call passes a null buffer to learn the length, the second fills a
buffer of that size.
"""

import ctypes
from typing import Optional, Tuple

from ._ffi import _FFI, UNQLITE_CONFIG_DISABLE_AUTO_COMMIT
from .codes import ResultCode
from .engine import Engine

_CORRUPT = int(ResultCode.CORRUPT_POINTER)


class NativeEngine(Engine):
    """Engine backed by the UnQLite shared library."""

    name = "native"

    def __init__(self, lib_path: Optional[str] = None):
        self._lib = _FFI.get_lib(lib_path)

    def open(self, path, mode):
        db = ctypes.c_void_p()
        path_bytes = path.encode("utf-8") if path is not None else None
        rc = self._lib.unqlite_open(ctypes.byref(db), path_bytes, int(mode))
        return rc, (db if db.value else None)

    def close(self, db):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_close(db)

    def _config(self, db, op: int, *args):
        """Call unqlite_config(); extra arguments must already be ctypes instances."""
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_config(db, op, *args)

    def config_disable_auto_commit(self, db):
        return self._config(db, UNQLITE_CONFIG_DISABLE_AUTO_COMMIT)

    def kv_store(self, db, key, value):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_kv_store(db, key, len(key), value, len(value))

    def kv_append(self, db, key, value):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_kv_append(db, key, len(key), value, len(value))

    def kv_fetch(self, db, key) -> Tuple[int, bytes]:
        if db is None:
            return _CORRUPT, b""
        length = ctypes.c_int64(0)
        rc = self._lib.unqlite_kv_fetch(db, key, len(key), None, ctypes.byref(length))
        if rc != 0:
            return rc, b""
        buf = ctypes.create_string_buffer(length.value)
        rc = self._lib.unqlite_kv_fetch(db, key, len(key), buf, ctypes.byref(length))
        return rc, buf.raw[:length.value]

    def kv_delete(self, db, key):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_kv_delete(db, key, len(key))

    def begin(self, db):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_begin(db)

    def commit(self, db):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_commit(db)

    def rollback(self, db):
        if db is None:
            return _CORRUPT
        return self._lib.unqlite_rollback(db)

    def cursor_init(self, db):
        if db is None:
            return _CORRUPT, None
        cursor = ctypes.c_void_p()
        rc = self._lib.unqlite_kv_cursor_init(db, ctypes.byref(cursor))
        return rc, (cursor if cursor.value else None)

    def cursor_release(self, db, cursor):
        if db is None or cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_release(db, cursor)

    def cursor_reset(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_reset(cursor)

    def cursor_seek(self, cursor, key, direction):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_seek(cursor, key, len(key), int(direction))

    def cursor_first_entry(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_first_entry(cursor)

    def cursor_last_entry(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_last_entry(cursor)

    def cursor_next_entry(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_next_entry(cursor)

    def cursor_prev_entry(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_prev_entry(cursor)

    def cursor_valid_entry(self, cursor):
        if cursor is None:
            return False
        return self._lib.unqlite_kv_cursor_valid_entry(cursor) == 1

    def cursor_key(self, cursor) -> Tuple[int, bytes]:
        if cursor is None:
            return _CORRUPT, b""
        length = ctypes.c_int(0)
        rc = self._lib.unqlite_kv_cursor_key(cursor, None, ctypes.byref(length))
        if rc != 0:
            return rc, b""
        buf = ctypes.create_string_buffer(length.value)
        rc = self._lib.unqlite_kv_cursor_key(cursor, buf, ctypes.byref(length))
        return rc, buf.raw[:length.value]

    def cursor_data(self, cursor) -> Tuple[int, bytes]:
        if cursor is None:
            return _CORRUPT, b""
        length = ctypes.c_int64(0)
        rc = self._lib.unqlite_kv_cursor_data(cursor, None, ctypes.byref(length))
        if rc != 0:
            return rc, b""
        buf = ctypes.create_string_buffer(length.value)
        rc = self._lib.unqlite_kv_cursor_data(cursor, buf, ctypes.byref(length))
        return rc, buf.raw[:length.value]

    def cursor_delete_entry(self, cursor):
        if cursor is None:
            return _CORRUPT
        return self._lib.unqlite_kv_cursor_delete_entry(cursor)
