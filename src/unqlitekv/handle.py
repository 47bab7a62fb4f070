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
UnQLite database handle.
"""

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Optional, Union

from .codes import OpenMode, ResultCode
from .config import Config, get_config
from .engine import Engine, create_engine

if TYPE_CHECKING:
    from .cursor import Cursor

logger = logging.getLogger(__name__)

BytesLike = Union[bytes, bytearray, memoryview, str]


def to_bytes(data: BytesLike) -> bytes:
    """Keys and values are raw bytes; text is stored as UTF-8."""
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


class Handle:
    """
    One connection to an UnQLite database.

    Construct, then open() before anything else; close() when done. Every
    operation records its outcome in ``last_result_code`` and returns True
    only if that code is OK, so a False return says nothing about *why*:
    check the code to tell NOT_FOUND from IO_ERROR, BUSY and the rest.
    Nothing here raises for engine failures.

    Transactions are managed by the engine: the first store, append or
    remove opens one and close() commits it. begin()/commit()/rollback()
    are only needed to batch many writes or to undo them.

    Example:
        db = Handle()
        db.open("./data.db", OpenMode.CREATE)
        db.store(b"key", b"value")
        value = db.fetch(b"key")
        db.close()

    Or with context manager:
        with Handle() as db:
            db.open(":mem:")
            db.store("key", "value")
    """

    def __init__(self, engine: Optional[Engine] = None, config: Optional[Config] = None):
        self._engine = engine
        self._config = config
        self._db = None
        self._name = None
        self._result_code = ResultCode.OK
        self._in_batch = False
        self._batch_failure: Optional[ResultCode] = None

    def _get_engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(config=self._config or get_config())
        return self._engine

    def _set(self, rc: int) -> bool:
        self._result_code = ResultCode.from_engine(rc)
        return self._result_code is ResultCode.OK

    def _set_write(self, rc: int) -> bool:
        ok = self._set(rc)
        # a missing key on remove does not spoil a batch
        if (not ok and self._in_batch and self._batch_failure is None
                and self._result_code is not ResultCode.NOT_FOUND):
            self._batch_failure = self._result_code
        return ok

    @property
    def last_result_code(self) -> ResultCode:
        """Result code of the last operation on this handle."""
        return self._result_code

    @property
    def is_open(self) -> bool:
        return self._db is not None

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def engine(self) -> Engine:
        return self._get_engine()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open(self, name: Optional[str], mode: OpenMode = OpenMode.CREATE) -> bool:
        """
        Open a connection to the database ``name``.

        A name of None or ":mem:" gives a private in-memory database that
        vanishes on close. The engine may defer touching the file until the
        first read or write, so a successful open does not prove the file is
        usable.

        If auto-commit is disabled in the configuration, it is disabled on
        the new connection too. A handle that is already open is closed
        first; if that close fails, the open fails with the close's code.
        """
        if self.is_open and not self.close():
            return False

        engine = self._get_engine()
        rc, db = engine.open(name, mode)
        if not self._set(rc):
            logger.debug("Open of %r failed: %s", name, self._result_code)
            return False

        self._db = db
        self._name = name
        logger.debug("Opened %r (mode=%s, engine=%s)", name, getattr(mode, "name", mode), engine.name)

        config = self._config or get_config()
        if not config.auto_commit:
            return self.disable_auto_commit()
        return True

    def close(self) -> bool:
        """
        Close the connection.

        An open transaction is committed, or rolled back if auto-commit was
        disabled. Cursors from this handle must be closed first.
        """
        ok = self._set(self._get_engine().close(self._db))
        if ok:
            logger.debug("Closed %r", self._name)
            self._db = None
        return ok

    def disable_auto_commit(self) -> bool:
        """Make close() roll back instead of commit an open transaction."""
        return self._set(self._get_engine().config_disable_auto_commit(self._db))

    def __enter__(self) -> "Handle":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self.is_open:
            self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"<Handle {self._name!r} {state} last={self._result_code.name}>"

    # =========================================================================
    # Key-Value API
    # =========================================================================

    def store(self, key: BytesLike, value: BytesLike) -> bool:
        """Write a record, replacing any existing value."""
        return self._set_write(self._get_engine().kv_store(self._db, to_bytes(key), to_bytes(value)))

    def append(self, key: BytesLike, value: BytesLike) -> bool:
        """Write a record, appending to any existing value."""
        return self._set_write(self._get_engine().kv_append(self._db, to_bytes(key), to_bytes(value)))

    def fetch(self, key: BytesLike) -> bytes:
        """
        Fetch the value stored under ``key``.

        Returns b"" when the key is missing (last_result_code is NOT_FOUND)
        or on any other failure; a stored empty value also returns b"" but
        with OK.
        """
        rc, value = self._get_engine().kv_fetch(self._db, to_bytes(key))
        if not self._set(rc):
            return b""
        return value

    def fetch_text(self, key: BytesLike) -> str:
        """fetch() decoded as UTF-8."""
        return self.fetch(key).decode("utf-8", errors="replace")

    def remove(self, key: BytesLike) -> bool:
        """Delete the record under ``key``; NOT_FOUND if there is none."""
        return self._set_write(self._get_engine().kv_delete(self._db, to_bytes(key)))

    def cursor(self) -> "Cursor":
        """Create a cursor over this database."""
        from .cursor import Cursor
        return Cursor(self)

    # =========================================================================
    # Transaction API
    # =========================================================================

    def begin(self) -> bool:
        """Begin a write transaction; a no-op if one is already open."""
        return self._set_write(self._get_engine().begin(self._db))

    def commit(self) -> bool:
        """Commit the open write transaction and release the write lock."""
        return self._set(self._get_engine().commit(self._db))

    def rollback(self) -> bool:
        """Revert the open write transaction; a no-op if none is open."""
        return self._set(self._get_engine().rollback(self._db))

    @contextmanager
    def transaction(self):
        """
        Group writes in one transaction.

        Commits when the block exits normally and rolls back if it raises.
        If begin() or any store, append or remove inside the block failed
        (a remove of a missing key excepted), nothing is committed: the
        block is rolled back and last_result_code is left at the first
        failure. Entering a block while already inside one joins it.

        Example:
            with db.transaction():
                for i in range(10000):
                    db.store(f"k{i}", b"v")
        """
        if self._in_batch:
            yield self
            return

        self._in_batch = True
        self._batch_failure = None
        try:
            self.begin()
            yield self
        except BaseException:
            self._in_batch = False
            self.rollback()
            raise

        self._in_batch = False
        failure = self._batch_failure
        if failure is None:
            self.commit()
            return
        logger.debug("Rolling back batch on %r after %s", self._name, failure)
        self.rollback()
        self._result_code = failure
