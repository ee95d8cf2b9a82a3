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
"""hopfly HTTP: request context, base handlers and job handlers."""

from hopfly.http.context import HttpContext, HttpResponse
from hopfly.http.handlers import (
    ErrorHandler,
    HttpFunc,
    HttpFuncResult,
    HttpHandler,
    clear_response,
    compose,
    early_return,
    handle_context,
    json,
    pipeline,
    set_http_header,
    set_status_code,
    skip_pipeline,
    text,
)
from hopfly.http.job_handlers import (
    ErrorHandlerJ,
    HttpFuncJ,
    HttpFuncResultJ,
    HttpHandlerJ,
    compose_both_base_to_job,
    compose_both_job_to_base,
    compose_job,
    compose_left_base_right_job,
    compose_left_base_right_job_to_base,
    compose_left_job_right_base,
    compose_left_job_right_base_to_base,
    of_error_handler,
    of_http_func,
    of_http_func_result,
    of_http_handler,
    to_error_handler,
    to_http_func,
    to_http_func_result,
    to_http_handler,
)

__all__ = [
    # Context
    "HttpContext",
    "HttpResponse",
    # Base representation
    "ErrorHandler",
    "HttpFunc",
    "HttpFuncResult",
    "HttpHandler",
    "clear_response",
    "compose",
    "early_return",
    "handle_context",
    "json",
    "pipeline",
    "set_http_header",
    "set_status_code",
    "skip_pipeline",
    "text",
    # Job representation
    "ErrorHandlerJ",
    "HttpFuncJ",
    "HttpFuncResultJ",
    "HttpHandlerJ",
    "of_error_handler",
    "of_http_func",
    "of_http_func_result",
    "of_http_handler",
    "to_error_handler",
    "to_http_func",
    "to_http_func_result",
    "to_http_handler",
    # Composition
    "compose_both_base_to_job",
    "compose_both_job_to_base",
    "compose_job",
    "compose_left_base_right_job",
    "compose_left_base_right_job_to_base",
    "compose_left_job_right_base",
    "compose_left_job_right_base_to_base",
]
