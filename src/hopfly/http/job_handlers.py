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
"""Job handler representation and its bridge to base handlers.

Handlers may be written against ``Job`` instead of plain awaitables. A job
continuation (``HttpFuncJ``) returns a ``Job`` that resolves to the context
when the request has been handled, or ``None`` to hand the request to the
next stage. The ``of_*`` functions lift base values into the job
representation and the ``to_*`` functions lower job values back. Both
directions keep results, side effects and exceptions intact: nothing here
catches or wraps a failure.

The ``compose_*`` helpers chain two handlers of any mix of representations.
The name says which operand is which and, with a ``_to_base`` suffix, that
the combined handler is lowered back to the base representation:

======================================== ======== ======== ========
function                                 left     right    result
======================================== ======== ======== ========
``compose_job``                          job      job      job
``compose_left_base_right_job``          base     job      job
``compose_left_job_right_base``          job      base     job
``compose_both_base_to_job``             base     base     job
``compose_both_job_to_base``             job      job      base
``compose_left_base_right_job_to_base``  base     job      base
``compose_left_job_right_base_to_base``  job      base     base
======================================== ======== ======== ========
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from hopfly.http.context import HttpContext
from hopfly.http.handlers import ErrorHandler, HttpFunc, HttpHandler, compose
from hopfly.job.job import Job

HttpFuncResultJ = Job[HttpContext | None]
HttpFuncJ = Callable[[HttpContext], HttpFuncResultJ]
HttpHandlerJ = Callable[[HttpFuncJ], HttpFuncJ]

# Receives the exception and a structlog logger, returns the handler that renders the failure.
ErrorHandlerJ = Callable[[Exception, Any], HttpHandlerJ]


def of_http_func_result(result: Awaitable[HttpContext | None]) -> HttpFuncResultJ:
    """Lift a base result; inside a running loop it is scheduled right away."""
    return Job.of_awaitable(result)


def to_http_func_result(result: HttpFuncResultJ) -> asyncio.Task[HttpContext | None]:
    """Start *result* on the running loop and return its task immediately."""
    return result.start_as_task()


def of_http_func(func: HttpFunc) -> HttpFuncJ:
    def func_j(ctx: HttpContext) -> HttpFuncResultJ:
        return of_http_func_result(func(ctx))

    return func_j


def to_http_func(func: HttpFuncJ) -> HttpFunc:
    def func_base(ctx: HttpContext) -> Awaitable[HttpContext | None]:
        return to_http_func_result(func(ctx))

    return func_base


def of_http_handler(handler: HttpHandler) -> HttpHandlerJ:
    def handler_j(next_: HttpFuncJ) -> HttpFuncJ:
        return of_http_func(handler(to_http_func(next_)))

    return handler_j


def to_http_handler(handler: HttpHandlerJ) -> HttpHandler:
    def handler_base(next_: HttpFunc) -> HttpFunc:
        return to_http_func(handler(of_http_func(next_)))

    return handler_base


def of_error_handler(error_handler: ErrorHandler) -> ErrorHandlerJ:
    def error_handler_j(exc: Exception, logger: Any) -> HttpHandlerJ:
        return of_http_handler(error_handler(exc, logger))

    return error_handler_j


def to_error_handler(error_handler: ErrorHandlerJ) -> ErrorHandler:
    def error_handler_base(exc: Exception, logger: Any) -> HttpHandler:
        return to_http_handler(error_handler(exc, logger))

    return error_handler_base


def compose_job(handler1: HttpHandlerJ, handler2: HttpHandlerJ) -> HttpHandlerJ:
    """Chain two job handlers, ``handler1`` first.

    A request whose response has already started skips both handlers and
    goes to the continuation the composed handler was given.
    """

    def handler(final: HttpFuncJ) -> HttpFuncJ:
        func = handler1(handler2(final))

        def composed(ctx: HttpContext) -> HttpFuncResultJ:
            if ctx.response.has_started:
                return final(ctx)
            return func(ctx)

        return composed

    return handler


def compose_left_base_right_job(handler1: HttpHandler, handler2: HttpHandlerJ) -> HttpHandlerJ:
    return compose_job(of_http_handler(handler1), handler2)


def compose_left_job_right_base(handler1: HttpHandlerJ, handler2: HttpHandler) -> HttpHandlerJ:
    return compose_job(handler1, of_http_handler(handler2))


def compose_both_base_to_job(handler1: HttpHandler, handler2: HttpHandler) -> HttpHandlerJ:
    return compose_job(of_http_handler(handler1), of_http_handler(handler2))


def compose_both_job_to_base(handler1: HttpHandlerJ, handler2: HttpHandlerJ) -> HttpHandler:
    return to_http_handler(compose_job(handler1, handler2))


def compose_left_base_right_job_to_base(handler1: HttpHandler, handler2: HttpHandlerJ) -> HttpHandler:
    return compose(handler1, to_http_handler(handler2))


def compose_left_job_right_base_to_base(handler1: HttpHandlerJ, handler2: HttpHandler) -> HttpHandler:
    return compose(to_http_handler(handler1), handler2)
