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
unqlitekv: Python access layer for the UnQLite embedded key/value store.

Two engines sit behind the same Handle/Cursor API:

1. Native (FFI) - ctypes bindings to libunqlite:
   - Real on-disk databases, journaling, locking
   - Build the library with build_native.py or point UNQLITEKV_LIB_PATH at it

2. Memory - pure Python, same result codes:
   - No native code needed
   - Best for: tests, notebooks, prototyping

Example:
    from unqlitekv import Handle, OpenMode, ResultCode

    db = Handle()
    db.open("./data.db", OpenMode.CREATE)
    db.store(b"key", b"value")
    db.fetch(b"missing")
    assert db.last_result_code is ResultCode.NOT_FOUND
    db.close()
"""

__version__ = "0.1.0"

from .codes import ResultCode, OpenMode, SeekDirection
from .handle import Handle
from .cursor import Cursor
from .engine import Engine, create_engine
from .memory import MemoryEngine
from .config import Config, get_config, reset_config
from .errors import (
    UnQLiteKVError,
    LibraryNotFoundError,
    ConfigurationError,
    ResultCodeError,
)

__all__ = [
    # Version
    "__version__",

    # Core API
    "Handle",
    "Cursor",
    "ResultCode",
    "OpenMode",
    "SeekDirection",

    # Engines
    "Engine",
    "MemoryEngine",
    "create_engine",

    # Configuration
    "Config",
    "get_config",
    "reset_config",

    # Errors
    "UnQLiteKVError",
    "LibraryNotFoundError",
    "ConfigurationError",
    "ResultCodeError",
]
