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
"""Helpers for building request contexts and recording pipeline calls in tests."""

from __future__ import annotations

from starlette.requests import Request

from hopfly.http.context import HttpContext, HttpResponse
from hopfly.http.handlers import HttpFunc, HttpHandler


def make_context(
    path: str = "/",
    method: str = "GET",
    headers: dict[str, str] | None = None,
    query_string: str = "",
) -> HttpContext:
    """Build a detached ``HttpContext`` (no transport) for *method* and *path*."""
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("testclient", 50000),
        "root_path": "",
        "path": path,
        "raw_path": path.encode("latin-1"),
        "query_string": query_string.encode("latin-1"),
        "headers": [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()],
    }
    return HttpContext(Request(scope), HttpResponse())


class CallRecorder:
    """Records the order in which wrapped handlers and continuations run.

    Usage::

        calls = CallRecorder()
        handler = calls.handler("auth")
        final = calls.func("final")
        await handler(final)(ctx)
        assert calls.log == ["auth", "final"]
    """

    def __init__(self) -> None:
        self.log: list[str] = []

    def handler(self, name: str) -> HttpHandler:
        """A pass-through handler that records *name* and then calls ``next``."""

        def handler(next_: HttpFunc) -> HttpFunc:
            async def func(ctx: HttpContext) -> HttpContext | None:
                self.log.append(name)
                return await next_(ctx)

            return func

        return handler

    def func(self, name: str, declines: bool = False) -> HttpFunc:
        """A continuation that records *name* and returns the context, or ``None`` if it *declines*."""

        async def func(ctx: HttpContext) -> HttpContext | None:
            self.log.append(name)
            return None if declines else ctx

        return func

    def count(self, name: str) -> int:
        return self.log.count(name)
