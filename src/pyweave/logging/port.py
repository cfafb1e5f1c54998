# Copyright 2026 Firefly Software Solutions Inc.
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
"""LoggingPort — the hexagonal port for framework logging.

Framework modules only ever call ``logging.getLogger(__name__)``. How those
records are rendered is decided once per process by a :class:`LoggingPort`
adapter, configured from the ``pyweave.logging`` section::

    pyweave:
      logging:
        format: json
        level:
          root: INFO
          pyweave.interception: DEBUG
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

from pyweave.core.config import Config

LEVEL_NAMES = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@runtime_checkable
class LoggingPort(Protocol):
    """Port defining the logging contract for PyWeave."""

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...


def parse_level(level: str | int) -> int:
    """Turn a level name from configuration into a stdlib level number."""
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name not in LEVEL_NAMES:
        raise ValueError(f"Unknown log level '{level}'; expected one of: {', '.join(LEVEL_NAMES)}")
    return getattr(logging, name)


def configure_logging(config: Config | None = None, adapter: LoggingPort | None = None) -> LoggingPort:
    """Configure process-wide logging and return the adapter in charge.

    *config* defaults to the packaged framework defaults and *adapter* to
    :class:`~pyweave.logging.structlog_adapter.StructlogAdapter`.
    """
    if adapter is None:
        from pyweave.logging.structlog_adapter import StructlogAdapter

        adapter = StructlogAdapter()
    adapter.configure(config if config is not None else Config.defaults())
    return adapter
