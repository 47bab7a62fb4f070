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
In-process engine.

Runs without the native library and returns the same statuses UnQLite does.
Useful for tests, notebooks, and platforms where libunqlite is not built.

Two traversal orders are available:
- ordered (default): keys sorted bytewise, LE/GE seeks honored, like a
  B+Tree backend
- hash: insertion order, LE/GE seeks degrade to an exact match, like the
  engine's default linear-hash backend

Named databases are kept in the engine instance for its lifetime, so two
handles opening the same name through one engine see the same records, the
way two connections to one file would. ``None`` and ``":mem:"`` always get a
fresh private database.

Write transactions follow the engine's model: the first mutation opens one
implicitly, commit/rollback end it, and close commits it (or rolls it back
when auto-commit is disabled). A transaction holds the database's write lock;
a mutation from another connection meanwhile gets BUSY.
"""

import bisect
from typing import Dict, List, Optional, Tuple

from .codes import ResultCode, SeekDirection
from .engine import Engine

_OK = int(ResultCode.OK)
_BUSY = int(ResultCode.BUSY)
_CANNOT_OPEN = int(ResultCode.CANNOT_OPEN)
_CORRUPT = int(ResultCode.CORRUPT_POINTER)
_DONE = int(ResultCode.DONE)
_EMPTY = int(ResultCode.EMPTY)
_EOF = int(ResultCode.END_OF_INPUT)
_INVALID = int(ResultCode.INVALID)
_NOT_FOUND = int(ResultCode.NOT_FOUND)
_READ_ONLY = int(ResultCode.IS_READ_ONLY)

_OPEN_READONLY = 0x01
_OPEN_READWRITE = 0x02
_OPEN_CREATE = 0x04

MEMORY_NAME = ":mem:"


class _Store:
    """Records of one database plus their traversal order."""

    def __init__(self, ordered: bool):
        self.ordered = ordered
        self.records: Dict[bytes, bytes] = {}
        self.order: List[bytes] = []
        self.writer: Optional["_Connection"] = None

    def put(self, key: bytes, value: bytes) -> None:
        if key not in self.records:
            if self.ordered:
                bisect.insort(self.order, key)
            else:
                self.order.append(key)
        self.records[key] = value

    def delete(self, key: bytes) -> None:
        del self.records[key]
        if self.ordered:
            self.order.pop(bisect.bisect_left(self.order, key))
        else:
            self.order.remove(key)

    def snapshot(self) -> Tuple[Dict[bytes, bytes], List[bytes]]:
        return dict(self.records), list(self.order)

    def restore(self, snap: Tuple[Dict[bytes, bytes], List[bytes]]) -> None:
        self.records, self.order = dict(snap[0]), list(snap[1])

    # Traversal helpers. Each returns a key or None for EOF.

    def first(self) -> Optional[bytes]:
        return self.order[0] if self.order else None

    def last(self) -> Optional[bytes]:
        return self.order[-1] if self.order else None

    def after(self, key: bytes) -> Optional[bytes]:
        if self.ordered:
            i = bisect.bisect_right(self.order, key)
        else:
            if key not in self.records:
                return None
            i = self.order.index(key) + 1
        return self.order[i] if i < len(self.order) else None

    def before(self, key: bytes) -> Optional[bytes]:
        if self.ordered:
            i = bisect.bisect_left(self.order, key) - 1
        else:
            if key not in self.records:
                return None
            i = self.order.index(key) - 1
        return self.order[i] if i >= 0 else None


class _Connection:
    def __init__(self, store: _Store, read_only: bool):
        self.store = store
        self.read_only = read_only
        self.auto_commit = True
        self.journal = None
        self.closed = False

    @property
    def in_transaction(self) -> bool:
        return self.journal is not None

    def start_transaction(self) -> int:
        writer = self.store.writer
        if writer is not None and writer is not self:
            return _BUSY
        if self.journal is None:
            self.journal = self.store.snapshot()
            self.store.writer = self
        return _OK

    def end_transaction(self, keep: bool) -> None:
        if self.journal is None:
            return
        if not keep:
            self.store.restore(self.journal)
        self.journal = None
        self.store.writer = None


class _Cursor:
    def __init__(self, conn: _Connection):
        self.conn = conn
        self.position: Optional[bytes] = None
        self.released = False

    @property
    def usable(self) -> bool:
        return not self.released and not self.conn.closed

    @property
    def valid(self) -> bool:
        return self.position is not None and self.position in self.conn.store.records

    def land(self, key: Optional[bytes], miss: int) -> int:
        self.position = key
        return _OK if key is not None else miss


class MemoryEngine(Engine):
    """Pure-Python engine with UnQLite status semantics."""

    name = "memory"

    def __init__(self, ordered: bool = True):
        self.ordered = ordered
        self._stores: Dict[str, _Store] = {}
        if not ordered:
            self.name = "memory-hash"

    # Database lifecycle

    def open(self, path, mode):
        mode = int(mode)
        if not mode & (_OPEN_READONLY | _OPEN_READWRITE | _OPEN_CREATE):
            mode |= _OPEN_CREATE
        read_only = bool(mode & _OPEN_READONLY)

        if path is None or path == MEMORY_NAME:
            store = _Store(self.ordered)
        elif path in self._stores:
            store = self._stores[path]
        elif mode & _OPEN_CREATE:
            store = self._stores[path] = _Store(self.ordered)
        else:
            return _CANNOT_OPEN, None
        return _OK, _Connection(store, read_only)

    def close(self, db):
        if db is None or db.closed:
            return _CORRUPT
        db.end_transaction(keep=db.auto_commit)
        db.closed = True
        return _OK

    def config_disable_auto_commit(self, db):
        if db is None or db.closed:
            return _CORRUPT
        db.auto_commit = False
        return _OK

    # Key/value

    def _write_check(self, db, key: bytes) -> int:
        if db is None or db.closed:
            return _CORRUPT
        if not key:
            return _EMPTY
        if db.read_only:
            return _READ_ONLY
        return db.start_transaction()

    def kv_store(self, db, key, value):
        rc = self._write_check(db, key)
        if rc == _OK:
            db.store.put(bytes(key), bytes(value))
        return rc

    def kv_append(self, db, key, value):
        rc = self._write_check(db, key)
        if rc == _OK:
            key = bytes(key)
            db.store.put(key, db.store.records.get(key, b"") + bytes(value))
        return rc

    def kv_fetch(self, db, key):
        if db is None or db.closed:
            return _CORRUPT, b""
        if not key:
            return _EMPTY, b""
        value = db.store.records.get(bytes(key))
        if value is None:
            return _NOT_FOUND, b""
        return _OK, value

    def kv_delete(self, db, key):
        if db is None or db.closed:
            return _CORRUPT
        if not key:
            return _EMPTY
        if db.read_only:
            return _READ_ONLY
        key = bytes(key)
        if key not in db.store.records:
            return _NOT_FOUND
        rc = db.start_transaction()
        if rc == _OK:
            db.store.delete(key)
        return rc

    # Transactions

    def _txn_check(self, db) -> int:
        if db is None or db.closed:
            return _CORRUPT
        if db.read_only:
            return _READ_ONLY
        return _OK

    def begin(self, db):
        rc = self._txn_check(db)
        if rc == _OK:
            rc = db.start_transaction()
        return rc

    def commit(self, db):
        rc = self._txn_check(db)
        if rc == _OK:
            db.end_transaction(keep=True)
        return rc

    def rollback(self, db):
        rc = self._txn_check(db)
        if rc == _OK:
            db.end_transaction(keep=False)
        return rc

    # Cursors

    def cursor_init(self, db):
        if db is None or db.closed:
            return _CORRUPT, None
        return _OK, _Cursor(db)

    def cursor_release(self, db, cursor):
        if db is None or cursor is None or cursor.released:
            return _CORRUPT
        if cursor.conn is not db:
            return _INVALID
        cursor.released = True
        cursor.position = None
        return _OK

    def cursor_reset(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        cursor.position = None
        return _OK

    def cursor_seek(self, cursor, key, direction):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        key = bytes(key)
        store = cursor.conn.store
        direction = int(direction)

        if store.ordered and direction == SeekDirection.LE:
            return cursor.land(store.before(key), _NOT_FOUND)
        if store.ordered and direction == SeekDirection.GE:
            return cursor.land(store.after(key), _NOT_FOUND)
        return cursor.land(key if key in store.records else None, _NOT_FOUND)

    def cursor_first_entry(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        return cursor.land(cursor.conn.store.first(), _DONE)

    def cursor_last_entry(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        return cursor.land(cursor.conn.store.last(), _DONE)

    def cursor_next_entry(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        if cursor.position is None:
            return _DONE
        return cursor.land(cursor.conn.store.after(cursor.position), _DONE)

    def cursor_prev_entry(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT
        if cursor.position is None:
            return _DONE
        return cursor.land(cursor.conn.store.before(cursor.position), _DONE)

    def cursor_valid_entry(self, cursor):
        return cursor is not None and cursor.usable and cursor.valid

    def cursor_key(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT, b""
        if not cursor.valid:
            return _EOF, b""
        return _OK, cursor.position

    def cursor_data(self, cursor):
        if cursor is None or not cursor.usable:
            return _CORRUPT, b""
        if not cursor.valid:
            return _EOF, b""
        return _OK, cursor.conn.store.records[cursor.position]

    def cursor_delete_entry(self, cursor):
        """Delete the record under the cursor and move to the one after it."""
        if cursor is None or not cursor.usable:
            return _CORRUPT
        if not cursor.valid:
            return _EOF
        conn = cursor.conn
        if conn.read_only:
            return _READ_ONLY
        rc = conn.start_transaction()
        if rc != _OK:
            return rc
        key = cursor.position
        successor = conn.store.after(key)
        conn.store.delete(key)
        cursor.position = successor
        return _OK
