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
"""HttpHandlerMiddleware: runs a handler pipeline as pure ASGI middleware."""

from __future__ import annotations

import time

from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from hopfly.config.properties.web import WebProperties
from hopfly.http.context import HttpContext
from hopfly.http.handlers import ErrorHandler, HttpHandler, early_return
from hopfly.logging.port import LoggingPort
from hopfly.logging.structlog_adapter import StructlogAdapter


class HttpHandlerMiddleware:
    """Runs *handler* for every HTTP request before the wrapped app.

    The pipeline ends with ``early_return``, so a handler chain that runs to
    completion answers the request. A stage that returns ``None`` hands the
    request to the wrapped ASGI app, unless the response has already
    started, in which case the started response is completed instead.

    On fall-through the wrapped app owns status and body. Headers the
    pipeline set on ``ctx.response`` are added to its ``http.response.start``
    message, except names the wrapped app set itself.

    Exceptions go to *error_handler* while the response has not started.
    With no error handler, or once bytes are on the wire, they propagate.
    Every request runs inside ``logging_port.request_scope(ctx)``.
    """

    def __init__(
        self,
        app: ASGIApp,
        handler: HttpHandler,
        error_handler: ErrorHandler | None = None,
        properties: WebProperties | None = None,
        logging_port: LoggingPort | None = None,
    ) -> None:
        self.app = app
        self._func = handler(early_return)
        self._error_handler = error_handler
        self._properties = properties or WebProperties()
        self._logging = logging_port or StructlogAdapter()
        self._logger = self._logging.get_logger(self._properties.logger_name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_with_status(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        ctx = HttpContext.from_asgi(scope, receive, send_with_status)
        with self._logging.request_scope(ctx):
            try:
                if await self._run(ctx) is None:
                    await self.app(scope, receive, _with_pipeline_headers(ctx, send_with_status))
            except Exception as exc:
                self._logger.error(
                    "http_request_failed",
                    duration_ms=_elapsed_ms(start),
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                raise

            if self._properties.request_logging:
                self._logger.info("http_request", status_code=status_code, duration_ms=_elapsed_ms(start))

    async def _run(self, ctx: HttpContext) -> HttpContext | None:
        try:
            result = await self._func(ctx)
        except Exception as exc:
            if self._error_handler is None or ctx.response.has_started:
                raise
            self._logger.exception("unhandled_exception", error_type=type(exc).__name__)
            await self._error_handler(exc, self._logger)(early_return)(ctx)
            await ctx.response.complete()
            return ctx

        if result is None:
            if not ctx.response.has_started:
                return None
            result = ctx
        await result.response.complete()
        return result


def _with_pipeline_headers(ctx: HttpContext, send: Send) -> Send:
    pending = ctx.response.headers.items()
    if not pending:
        return send

    async def send_merged(message: Message) -> None:
        if message["type"] == "http.response.start":
            headers = MutableHeaders(scope=message)
            own = set(headers.keys())
            for name, value in pending:
                if name not in own:
                    headers.append(name, value)
        await send(message)

    return send_merged


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)
