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
"""StructlogAdapter: request-scoped structlog logging for handler pipelines."""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import AbstractContextManager
from typing import Any

import structlog

from hopfly.core.config import Config
from hopfly.http.context import HttpContext
from hopfly.kernel.exceptions import ConfigurationException

REQUEST_ID_ITEM = "request_id"

_RENDERERS: dict[str, Any] = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
    "logfmt": structlog.processors.LogfmtRenderer,
}


class StructlogAdapter:
    """Logging backend for ``HttpHandlerMiddleware`` built on structlog.

    Settings (all under ``hopfly.logging``):

    * ``level.root`` and ``level.<logger>``: stdlib levels.
    * ``format``: ``console``, ``json`` or ``logfmt``.
    * ``request-id-header``: incoming header reused as the request id; a
      fresh uuid4 hex is generated when the header is absent.

    ``request_scope`` binds ``request_id``, ``method`` and ``path`` as
    structlog context variables, so every event logged while a pipeline runs,
    including those from error handlers, carries them. The request id is
    also stored in ``ctx.items["request_id"]`` for handlers.
    """

    def __init__(self, request_id_header: str = "x-request-id") -> None:
        self._root_level: str = "INFO"
        self._format: str = "console"
        self._module_levels: dict[str, str] = {}
        self._request_id_header = request_id_header.lower()

    @classmethod
    def from_config(cls, config: Config) -> StructlogAdapter:
        adapter = cls()
        adapter.configure(config)
        return adapter

    @property
    def request_id_header(self) -> str:
        return self._request_id_header

    def configure(self, config: Config) -> None:
        levels = dict(config.get_section("hopfly.logging.level"))
        self._root_level = str(levels.pop("root", "INFO")).upper()
        self._module_levels = {name: str(level).upper() for name, level in levels.items()}
        self._format = str(config.get("hopfly.logging.format", "console")).lower()
        if self._format not in _RENDERERS:
            raise ConfigurationException(
                f"Unknown log format '{self._format}'",
                code="LOG_FORMAT",
                context={"supported": sorted(_RENDERERS)},
            )
        self._request_id_header = str(
            config.get("hopfly.logging.request-id-header", self._request_id_header)
        ).lower()

        self._setup_structlog()
        for name, level in self._module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(getattr(logging, level.upper(), logging.INFO))

    def request_scope(self, ctx: HttpContext) -> AbstractContextManager[Any]:
        request_id = ctx.request.headers.get(self._request_id_header) or uuid.uuid4().hex
        ctx.items[REQUEST_ID_ITEM] = request_id
        return structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=ctx.request.method,
            path=ctx.request.url.path,
        )

    def _setup_structlog(self) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _RENDERERS[self._format](),
        ]
        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=getattr(logging, self._root_level, logging.INFO),
            force=True,
        )
