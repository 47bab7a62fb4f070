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
Runtime settings.

Read from the process environment after loading a ``.env`` file, if any:

    UNQLITEKV_ENGINE       native | memory | memory-hash   (default: native)
    UNQLITEKV_LIB_PATH     directory holding libunqlite     (default: search)
    UNQLITEKV_AUTO_COMMIT  1/0, true/false, yes/no, on/off  (default: 1)
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError

ENGINES = ("native", "memory", "memory-hash")

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(f"{name}={raw!r} is not a boolean")


@dataclass(frozen=True)
class Config:
    engine: str = "native"
    lib_path: Optional[str] = None
    auto_commit: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        engine = (os.environ.get("UNQLITEKV_ENGINE") or "native").strip().lower()
        if engine not in ENGINES:
            raise ConfigurationError(
                f"Unknown engine '{engine}'. Valid: {', '.join(ENGINES)}"
            )
        lib_path = os.environ.get("UNQLITEKV_LIB_PATH") or None
        auto_commit = _parse_bool(
            "UNQLITEKV_AUTO_COMMIT", os.environ.get("UNQLITEKV_AUTO_COMMIT") or "1"
        )
        return cls(engine=engine, lib_path=lib_path, auto_commit=auto_commit)


_config: Optional[Config] = None


def get_config() -> Config:
    """Return the process-wide settings, loading them on first use."""
    global _config
    if _config is None:
        load_dotenv(find_dotenv(usecwd=True))
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget cached settings so the next get_config() re-reads the environment."""
    global _config
    _config = None
