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
"""Exception hierarchy for hopfly.

All library exceptions inherit from HopflyException so callers can catch
them in one place. Handler failures are never wrapped in these types: an
exception raised inside a handler reaches the caller unchanged.

Categories:
- ConfigurationException: invalid or unbindable configuration
- ResponseAlreadyStartedException: response mutated after transmission began
"""

from __future__ import annotations


class HopflyException(Exception):
    """Base exception for all hopfly errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "RESPONSE_STARTED").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


class ConfigurationException(HopflyException):
    """Configuration could not be loaded, resolved or bound."""


class ResponseAlreadyStartedException(HopflyException):
    """The HTTP response has begun transmission and can no longer be modified."""
