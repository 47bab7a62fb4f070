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
Storage engine interface.

One method per engine entry point. Every method returns the raw integer
status of the engine (reads return ``(status, bytes)``); translating statuses
into ResultCode is the caller's job. Database and cursor handles are opaque
objects owned by the engine; ``None`` stands for a null handle.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

from .config import Config, get_config
from .errors import ConfigurationError


class Engine(ABC):
    """Backend interface for Handle and Cursor."""

    name = "abstract"

    # Database lifecycle

    @abstractmethod
    def open(self, path: Optional[str], mode: int) -> Tuple[int, Any]:
        """Return ``(status, db)``. A path of None or ':mem:' is in-memory."""

    @abstractmethod
    def close(self, db: Any) -> int:
        ...

    @abstractmethod
    def config_disable_auto_commit(self, db: Any) -> int:
        """Make close() roll back an open transaction instead of committing it."""

    # Key/value

    @abstractmethod
    def kv_store(self, db: Any, key: bytes, value: bytes) -> int:
        ...

    @abstractmethod
    def kv_append(self, db: Any, key: bytes, value: bytes) -> int:
        ...

    @abstractmethod
    def kv_fetch(self, db: Any, key: bytes) -> Tuple[int, bytes]:
        ...

    @abstractmethod
    def kv_delete(self, db: Any, key: bytes) -> int:
        ...

    # Transactions

    @abstractmethod
    def begin(self, db: Any) -> int:
        ...

    @abstractmethod
    def commit(self, db: Any) -> int:
        ...

    @abstractmethod
    def rollback(self, db: Any) -> int:
        ...

    # Cursors

    @abstractmethod
    def cursor_init(self, db: Any) -> Tuple[int, Any]:
        """Return ``(status, cursor)``."""

    @abstractmethod
    def cursor_release(self, db: Any, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_reset(self, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_seek(self, cursor: Any, key: bytes, direction: int) -> int:
        ...

    @abstractmethod
    def cursor_first_entry(self, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_last_entry(self, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_next_entry(self, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_prev_entry(self, cursor: Any) -> int:
        ...

    @abstractmethod
    def cursor_valid_entry(self, cursor: Any) -> bool:
        ...

    @abstractmethod
    def cursor_key(self, cursor: Any) -> Tuple[int, bytes]:
        ...

    @abstractmethod
    def cursor_data(self, cursor: Any) -> Tuple[int, bytes]:
        ...

    @abstractmethod
    def cursor_delete_entry(self, cursor: Any) -> int:
        ...


def create_engine(name: Optional[str] = None, config: Optional[Config] = None) -> Engine:
    """
    Build an engine by name.

    Args:
        name: 'native', 'memory' or 'memory-hash'. Defaults to the configured
            engine.
        config: Settings to use instead of get_config().
    """
    config = config or get_config()
    name = (name or config.engine).lower()

    if name == "native":
        from .native import NativeEngine
        return NativeEngine(lib_path=config.lib_path)
    elif name == "memory":
        from .memory import MemoryEngine
        return MemoryEngine()
    elif name == "memory-hash":
        from .memory import MemoryEngine
        return MemoryEngine(ordered=False)
    raise ConfigurationError(
        f"Unknown engine '{name}'. Valid: native, memory, memory-hash"
    )
