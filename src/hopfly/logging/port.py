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
"""LoggingPort: how the web layer obtains loggers and scopes them to a request."""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from hopfly.core.config import Config

if TYPE_CHECKING:
    from hopfly.http.context import HttpContext


@runtime_checkable
class LoggingPort(Protocol):
    """Port between ``HttpHandlerMiddleware`` and a logging backend.

    ``request_scope`` is entered around every pipeline run; anything it binds
    must be visible to loggers obtained from ``get_logger`` until it exits.
    """

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...
    def request_scope(self, ctx: HttpContext) -> AbstractContextManager[Any]: ...
