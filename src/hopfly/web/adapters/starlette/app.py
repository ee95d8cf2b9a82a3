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
"""Application factory wiring a handler pipeline into Starlette."""

from __future__ import annotations

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import BaseRoute

from hopfly.config.properties.web import WebProperties
from hopfly.core.config import Config
from hopfly.http.handlers import ErrorHandler, HttpHandler
from hopfly.http.job_handlers import ErrorHandlerJ, HttpHandlerJ, to_error_handler, to_http_handler
from hopfly.logging.port import LoggingPort
from hopfly.logging.structlog_adapter import StructlogAdapter
from hopfly.web.adapters.starlette.middleware import HttpHandlerMiddleware
from hopfly.web.errors import internal_error_handler


def create_app(
    handler: HttpHandler | None = None,
    job_handler: HttpHandlerJ | None = None,
    error_handler: ErrorHandler | None = None,
    job_error_handler: ErrorHandlerJ | None = None,
    config: Config | None = None,
    routes: list[BaseRoute] | None = None,
    logging_port: LoggingPort | None = None,
    debug: bool = False,
) -> Starlette:
    """Create a Starlette application that runs a handler pipeline.

    Pass exactly one of *handler* (base representation) or *job_handler*;
    a job handler is lowered with ``to_http_handler``. Requests the pipeline
    declines fall through to *routes*. Without an explicit error handler,
    failures are answered by ``internal_error_handler`` configured from
    ``hopfly.web.error-details``. Logging goes through *logging_port*,
    a ``StructlogAdapter`` unless given, configured from *config*.
    """
    if (handler is None) == (job_handler is None):
        raise ValueError("create_app() needs exactly one of 'handler' or 'job_handler'")
    if error_handler is not None and job_error_handler is not None:
        raise ValueError("create_app() accepts 'error_handler' or 'job_error_handler', not both")

    config = config or Config.defaults()
    logging_port = logging_port or StructlogAdapter()
    logging_port.configure(config)
    properties = config.bind(WebProperties)

    base_handler = handler if handler is not None else to_http_handler(job_handler)  # type: ignore[arg-type]
    if job_error_handler is not None:
        error_handler = to_error_handler(job_error_handler)
    elif error_handler is None:
        error_handler = internal_error_handler(properties.error_details)

    return Starlette(
        debug=debug,
        routes=routes or [],
        middleware=[
            Middleware(
                HttpHandlerMiddleware,
                handler=base_handler,
                error_handler=error_handler,
                properties=properties,
                logging_port=logging_port,
            )
        ],
    )
