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
"""Default error handler rendering uncaught exceptions as JSON 500 responses."""

from __future__ import annotations

from typing import Any

from hopfly.http.handlers import (
    ErrorHandler,
    HttpHandler,
    clear_response,
    json,
    pipeline,
    set_status_code,
)
from hopfly.kernel.exceptions import HopflyException


def internal_error_handler(include_details: bool = False) -> ErrorHandler:
    """Build an error handler answering ``500`` with ``{"error": ...}``.

    With *include_details* the body also carries the exception type,
    message and, for hopfly exceptions, the error code.
    """

    def error_handler(exc: Exception, logger: Any) -> HttpHandler:
        payload: dict[str, Any] = {"error": "Internal Server Error"}
        if include_details:
            payload["type"] = type(exc).__name__
            payload["message"] = str(exc)
            if isinstance(exc, HopflyException) and exc.code is not None:
                payload["code"] = exc.code
        logger.debug("rendering_error_response", error_type=type(exc).__name__)
        return pipeline(clear_response, set_status_code(500), json(payload))

    return error_handler
