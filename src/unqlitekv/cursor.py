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
Cursors over an UnQLite database.
"""

import logging
from typing import TYPE_CHECKING, Iterator, Tuple

from .codes import ResultCode, SeekDirection
from .handle import BytesLike, to_bytes

if TYPE_CHECKING:
    from .handle import Handle

logger = logging.getLogger(__name__)


class Cursor:
    """
    Iterator over the records of a database.

    A new cursor is unpositioned; first(), last(), seek(), next() or
    previous() place it on a record (is_valid() is True) or at EOF.
    Walking past either end lands at EOF. key() and value() read the
    current record and return b"" with a failure code at EOF.

    The cursor keeps its own last_result_code, separate from its handle's.
    It must be closed before its handle is.

    Example:
        with db.cursor() as cur:
            cur.first()
            while cur.is_valid():
                print(cur.key(), cur.value())
                cur.next()
    """

    def __init__(self, handle: "Handle"):
        self._handle = handle
        self._engine = handle._get_engine()
        self._db = handle._db
        self._result_code = ResultCode.OK
        rc, self._cursor = self._engine.cursor_init(self._db)
        self._set(rc)

    def _set(self, rc: int) -> bool:
        self._result_code = ResultCode.from_engine(rc)
        return self._result_code is ResultCode.OK

    @property
    def last_result_code(self) -> ResultCode:
        """Result code of the last operation on this cursor."""
        return self._result_code

    @property
    def handle(self) -> "Handle":
        return self._handle

    def close(self) -> bool:
        """Release the engine cursor. Further calls are no-ops."""
        if self._cursor is None:
            return True
        rc = self._engine.cursor_release(self._db, self._cursor)
        self._cursor = None
        logger.debug("Released cursor on %r", self._handle.name)
        return self._set(rc)

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __del__(self):
        # Only while the connection that made the cursor is still live.
        if getattr(self, "_cursor", None) is not None and self._handle._db is self._db:
            self.close()

    # =========================================================================
    # Positioning
    # =========================================================================

    def reset(self) -> bool:
        """Return to the unpositioned state of a new cursor."""
        return self._set(self._engine.cursor_reset(self._cursor))

    def seek(self, key: BytesLike, direction: SeekDirection = SeekDirection.EXACT_MATCH) -> bool:
        """
        Position on ``key``.

        EXACT_MATCH lands on the key or at EOF with NOT_FOUND. LE lands on
        the largest key smaller than ``key``, GE on the smallest key larger
        than it, EOF if there is none. LE and GE need a range-ordered backend;
        elsewhere the engine quietly performs an exact match instead.
        """
        return self._set(self._engine.cursor_seek(self._cursor, to_bytes(key), direction))

    def first(self) -> bool:
        return self._set(self._engine.cursor_first_entry(self._cursor))

    def last(self) -> bool:
        return self._set(self._engine.cursor_last_entry(self._cursor))

    def next(self) -> bool:
        return self._set(self._engine.cursor_next_entry(self._cursor))

    def previous(self) -> bool:
        return self._set(self._engine.cursor_prev_entry(self._cursor))

    def is_valid(self) -> bool:
        """True if the cursor is on a record. Asks the engine every time."""
        return self._engine.cursor_valid_entry(self._cursor)

    # =========================================================================
    # Record access
    # =========================================================================

    def key(self) -> bytes:
        rc, data = self._engine.cursor_key(self._cursor)
        if not self._set(rc):
            return b""
        return data

    def value(self) -> bytes:
        rc, data = self._engine.cursor_data(self._cursor)
        if not self._set(rc):
            return b""
        return data

    def value_text(self) -> str:
        """value() decoded as UTF-8."""
        return self.value().decode("utf-8", errors="replace")

    def remove(self) -> bool:
        """Delete the record under the cursor."""
        return self._set(self._engine.cursor_delete_entry(self._cursor))

    def __iter__(self) -> Iterator[Tuple[bytes, bytes]]:
        """Yield (key, value) from the first record onward."""
        self.first()
        while self.is_valid():
            yield self.key(), self.value()
            self.next()

    def __repr__(self) -> str:
        return f"<Cursor on {self._handle.name!r} last={self._result_code.name}>"
