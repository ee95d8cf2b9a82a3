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
"""Base handler representation built on plain asyncio awaitables.

A continuation (``HttpFunc``) takes the request context and returns an
awaitable that resolves to the context when the request has been handled,
or to ``None`` when the next stage outside the pipeline should run. A
handler (``HttpHandler``) takes the next continuation and returns a new
one, so it may run code before or after ``next`` or skip it entirely.
"""

from __future__ import annotations

import json as _json
from collections.abc import Awaitable, Callable
from functools import reduce
from typing import Any

from hopfly.http.context import HttpContext

HttpFuncResult = Awaitable[HttpContext | None]
HttpFunc = Callable[[HttpContext], HttpFuncResult]
HttpHandler = Callable[[HttpFunc], HttpFunc]

# Receives the exception and a structlog logger, returns the handler that renders the failure.
ErrorHandler = Callable[[Exception, Any], HttpHandler]


async def skip_pipeline(ctx: HttpContext) -> HttpContext | None:
    """Continuation that declines the request."""
    return None


async def early_return(ctx: HttpContext) -> HttpContext | None:
    """Continuation that ends the pipeline with the context as the response."""
    return ctx


def compose(handler1: HttpHandler, handler2: HttpHandler) -> HttpHandler:
    """Chain two handlers: ``handler1`` runs first and its ``next`` is ``handler2``.

    Once the response has started the composed stage goes straight to the
    continuation it was given. The check happens per request.
    """

    def handler(final: HttpFunc) -> HttpFunc:
        func = handler1(handler2(final))

        def composed(ctx: HttpContext) -> HttpFuncResult:
            if ctx.response.has_started:
                return final(ctx)
            return func(ctx)

        return composed

    return handler


def pipeline(*handlers: HttpHandler) -> HttpHandler:
    """Compose handlers left to right."""
    if not handlers:
        raise ValueError("pipeline() requires at least one handler")
    return reduce(compose, handlers)


def handle_context(fn: Callable[[HttpContext], HttpFuncResult]) -> HttpHandler:
    """Lift ``fn`` into a handler that ignores ``next`` and returns whatever ``fn`` returns."""

    def handler(next_: HttpFunc) -> HttpFunc:
        return fn

    return handler


def set_status_code(status_code: int) -> HttpHandler:
    def handler(next_: HttpFunc) -> HttpFunc:
        def func(ctx: HttpContext) -> HttpFuncResult:
            ctx.response.status_code = status_code
            return next_(ctx)

        return func

    return handler


def set_http_header(name: str, value: str) -> HttpHandler:
    def handler(next_: HttpFunc) -> HttpFunc:
        def func(ctx: HttpContext) -> HttpFuncResult:
            ctx.response.set_header(name, value)
            return next_(ctx)

        return func

    return handler


def clear_response(next_: HttpFunc) -> HttpFunc:
    """Handler resetting status, headers and body, typically used by error handlers."""

    def func(ctx: HttpContext) -> HttpFuncResult:
        ctx.response.clear()
        return next_(ctx)

    return func


def text(content: str) -> HttpHandler:
    """Set a ``text/plain`` body and end the pipeline."""

    def handler(next_: HttpFunc) -> HttpFunc:
        async def func(ctx: HttpContext) -> HttpContext | None:
            ctx.response.set_header("content-type", "text/plain; charset=utf-8")
            ctx.response.set_body(content)
            return ctx

        return func

    return handler


def json(payload: Any) -> HttpHandler:
    """Serialize *payload* as an ``application/json`` body and end the pipeline."""
    body = _json.dumps(payload, ensure_ascii=False, separators=(",", ":"))

    def handler(next_: HttpFunc) -> HttpFunc:
        async def func(ctx: HttpContext) -> HttpContext | None:
            ctx.response.set_header("content-type", "application/json")
            ctx.response.set_body(body)
            return ctx

        return func

    return handler
