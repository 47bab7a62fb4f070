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
Engine status codes and flag enumerations.

Numeric values are the UnQLite constants themselves, so a logged code can be
looked up directly in the engine documentation.
"""

import logging
from enum import IntEnum

from .errors import ConfigurationError, ResultCodeError

logger = logging.getLogger(__name__)


class ResultCode(IntEnum):
    """Status returned by every engine call."""

    OK = 0
    """Successful result."""

    # Resource exhaustion
    NO_MEMORY = -1
    """Out of memory."""
    FULL = -73
    """Full database (unlikely)."""
    LIMIT = -7
    """Database limit reached."""

    # I/O and access
    IO_ERROR = -2
    """IO error."""
    CANNOT_OPEN = -74
    """Unable to open the database file."""
    LOCKING_ERROR = -76
    """Locking protocol error."""
    BUSY = -14
    """The database file is locked."""
    LOCKED = -4
    """Forbidden operation."""
    IS_READ_ONLY = -75
    """Read only key/value storage engine."""
    PERMISSION_ERROR = -19
    """Permission error."""

    # Logical / data
    NOT_FOUND = -6
    """No such record."""
    EXISTS = -11
    """Record exists."""
    EMPTY = -3
    """Empty record or key."""
    INVALID = -9
    """Invalid parameter."""
    NOT_IMPLEMENTED = -17
    """Method not implemented by the underlying key/value storage engine."""
    NO_SUCH_FUNCTION = -20
    """No such method."""
    CORRUPT_POINTER = -24
    """Null or released engine handle."""

    # Control flow
    DONE = -28
    """Operation done (e.g. cursor walked past the last record)."""
    END_OF_INPUT = -18
    """End of input."""
    ABORT = -10
    """Another thread has released this instance."""

    # Inherited from the embedded Jx9 scripting engine
    COMPILE_ERROR = -70
    """Compilation error."""
    VM_ERROR = -71
    """Virtual machine error."""
    UNKNOWN_ERROR = -13
    """Unknown configuration option or untranslatable status."""

    @classmethod
    def from_engine(cls, rc: int) -> "ResultCode":
        """Translate a raw engine status."""
        try:
            return cls(rc)
        except ValueError:
            logger.warning("Engine returned unknown status %r, reporting UNKNOWN_ERROR", rc)
            return cls.UNKNOWN_ERROR

    @property
    def is_ok(self) -> bool:
        return self is ResultCode.OK

    @property
    def category(self) -> str:
        """Taxonomy bucket: success, resource, io, logical, control or script."""
        return _CATEGORIES[self]

    def raise_for(self, operation: str = "") -> None:
        """Raise ResultCodeError unless this code is OK.

        Handles and cursors never raise on their own; this is for callers
        that prefer exception flow over checking booleans.
        """
        if self is not ResultCode.OK:
            raise ResultCodeError(self, operation)

    def __str__(self) -> str:
        return self.name


_CATEGORIES = {
    ResultCode.OK: "success",
    ResultCode.NO_MEMORY: "resource",
    ResultCode.FULL: "resource",
    ResultCode.LIMIT: "resource",
    ResultCode.IO_ERROR: "io",
    ResultCode.CANNOT_OPEN: "io",
    ResultCode.LOCKING_ERROR: "io",
    ResultCode.BUSY: "io",
    ResultCode.LOCKED: "io",
    ResultCode.IS_READ_ONLY: "io",
    ResultCode.PERMISSION_ERROR: "io",
    ResultCode.NOT_FOUND: "logical",
    ResultCode.EXISTS: "logical",
    ResultCode.EMPTY: "logical",
    ResultCode.INVALID: "logical",
    ResultCode.NOT_IMPLEMENTED: "logical",
    ResultCode.NO_SUCH_FUNCTION: "logical",
    ResultCode.CORRUPT_POINTER: "logical",
    ResultCode.DONE: "control",
    ResultCode.END_OF_INPUT: "control",
    ResultCode.ABORT: "control",
    ResultCode.COMPILE_ERROR: "script",
    ResultCode.VM_ERROR: "script",
    ResultCode.UNKNOWN_ERROR: "script",
}


# Raw engine open flags.
_OPEN_READONLY = 0x00000001
_OPEN_READWRITE = 0x00000002
_OPEN_CREATE = 0x00000004
_OPEN_MMAP = 0x00000100


class OpenMode(IntEnum):
    """Values for the third argument of the engine's open call."""

    READ_ONLY = _OPEN_READONLY
    """Open read-only; store, append, commit and rollback are refused."""

    READ_WRITE = _OPEN_READWRITE
    """Open with read+write privileges; the database must already exist."""

    CREATE = _OPEN_CREATE
    """Create the database if missing, otherwise open it read+write."""

    READ_ONLY_WITH_MMAP = _OPEN_READONLY | _OPEN_MMAP
    """Read-only memory view of the whole database."""

    @classmethod
    def from_string(cls, s: str) -> "OpenMode":
        """Parse an open mode from a config-style string."""
        s_lower = s.lower().replace("-", "_")
        if s_lower in ("create", "c"):
            return cls.CREATE
        elif s_lower in ("read_write", "readwrite", "rw"):
            return cls.READ_WRITE
        elif s_lower in ("read_only", "readonly", "ro"):
            return cls.READ_ONLY
        elif s_lower in ("read_only_with_mmap", "mmap"):
            return cls.READ_ONLY_WITH_MMAP
        else:
            raise ConfigurationError(
                f"Unknown open mode '{s}'. Valid: create, rw, ro, mmap"
            )

    @property
    def is_read_only(self) -> bool:
        return bool(self & _OPEN_READONLY)


class SeekDirection(IntEnum):
    """Positioning semantics for Cursor.seek()."""

    EXACT_MATCH = 1
    """Land on the key itself, or at EOF with NOT_FOUND."""

    LE = 2
    """Largest key smaller than the given key (range-ordered backends only)."""

    GE = 3
    """Smallest key larger than the given key (range-ordered backends only)."""


__all__ = [
    "ResultCode",
    "OpenMode",
    "SeekDirection",
]
