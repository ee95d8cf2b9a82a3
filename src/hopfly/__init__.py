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
"""hopfly: compose HTTP handler pipelines written with asyncio awaitables or cold jobs."""

from hopfly.core.config import Config
from hopfly.http import (
    ErrorHandler,
    ErrorHandlerJ,
    HttpContext,
    HttpFunc,
    HttpFuncJ,
    HttpHandler,
    HttpHandlerJ,
    HttpResponse,
    compose,
    compose_both_base_to_job,
    compose_both_job_to_base,
    compose_job,
    compose_left_base_right_job,
    compose_left_base_right_job_to_base,
    compose_left_job_right_base,
    compose_left_job_right_base_to_base,
    of_http_func,
    of_http_func_result,
    of_http_handler,
    to_http_func,
    to_http_func_result,
    to_http_handler,
)
from hopfly.job import Job, job

__version__ = "0.1.0"

__all__ = [
    "Config",
    "ErrorHandler",
    "ErrorHandlerJ",
    "HttpContext",
    "HttpFunc",
    "HttpFuncJ",
    "HttpHandler",
    "HttpHandlerJ",
    "HttpResponse",
    "Job",
    "compose",
    "compose_both_base_to_job",
    "compose_both_job_to_base",
    "compose_job",
    "compose_left_base_right_job",
    "compose_left_base_right_job_to_base",
    "compose_left_job_right_base",
    "compose_left_job_right_base_to_base",
    "job",
    "of_http_func",
    "of_http_func_result",
    "of_http_handler",
    "to_http_func",
    "to_http_func_result",
    "to_http_handler",
]
