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
Exceptions for environment failures.

Key/value and cursor operations report engine failures through result codes,
never through these exceptions.
"""


class UnQLiteKVError(Exception):
    """Base exception for unqlitekv."""


class LibraryNotFoundError(UnQLiteKVError):
    """The native UnQLite shared library could not be located or loaded."""

    def __init__(self, lib_name: str, searched: list):
        self.lib_name = lib_name
        self.searched = list(searched)
        super().__init__(
            f"Could not find {lib_name}. "
            f"Searched in: {', '.join(self.searched[:5])}... "
            "Set UNQLITEKV_LIB_PATH or run build_native.py."
        )


class ConfigurationError(UnQLiteKVError):
    """A configuration value could not be parsed."""


class ResultCodeError(UnQLiteKVError):
    """Raised by ResultCode.raise_for() for a non-OK code."""

    def __init__(self, code, operation: str = ""):
        self.code = code
        self.operation = operation
        where = f"{operation}: " if operation else ""
        super().__init__(f"{where}{code.name} ({int(code)})")


__all__ = [
    "UnQLiteKVError",
    "LibraryNotFoundError",
    "ConfigurationError",
    "ResultCodeError",
]
