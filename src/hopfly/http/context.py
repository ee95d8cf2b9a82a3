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
"""Request context: the mutable per-request handle passed through handler pipelines.

``HttpContext`` pairs a Starlette ``Request`` with an ``HttpResponse``
builder. The response is buffered until a handler starts it (``start`` or
``write``) or the hosting middleware completes it. Once started, status and
headers are on the wire and ``has_started`` stays ``True``.
"""

from __future__ import annotations

from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import Receive, Scope, Send

from hopfly.kernel.exceptions import ResponseAlreadyStartedException


class HttpResponse:
    """Outgoing response for one request.

    When constructed with an ASGI ``send`` callable the response streams to
    the client; without one it is detached and only records what was
    produced, which is what tests and offline pipelines use.
    """

    def __init__(self, send: Send | None = None) -> None:
        self._send = send
        self._status_code = 200
        self._headers = MutableHeaders()
        self._body = bytearray()
        self._flushed = 0
        self._started = False
        self._completed = False

    @property
    def has_started(self) -> bool:
        return self._started

    @property
    def is_completed(self) -> bool:
        return self._completed

    @property
    def status_code(self) -> int:
        return self._status_code

    @status_code.setter
    def status_code(self, value: int) -> None:
        self._ensure_not_started("status_code")
        self._status_code = value

    @property
    def headers(self) -> MutableHeaders:
        return self._headers

    @property
    def body(self) -> bytes:
        """Every body byte produced so far, sent or not."""
        return bytes(self._body)

    def set_header(self, name: str, value: str) -> None:
        self._ensure_not_started("headers")
        self._headers[name] = value

    def set_body(self, content: bytes | str) -> None:
        """Replace the buffered body."""
        self._ensure_not_started("body")
        self._body = bytearray(content.encode("utf-8") if isinstance(content, str) else content)

    def clear(self) -> None:
        """Reset status, headers and body to their initial state."""
        self._ensure_not_started("response")
        self._status_code = 200
        self._headers = MutableHeaders()
        self._body = bytearray()

    async def start(self) -> None:
        """Send the status line and headers. Later calls are no-ops."""
        if self._started:
            return
        self._started = True
        if self._send is not None:
            await self._send(
                {
                    "type": "http.response.start",
                    "status": self._status_code,
                    "headers": self._headers.raw,
                }
            )

    async def write(self, chunk: bytes | str) -> None:
        """Stream *chunk* (and any buffered body) to the client, starting the response if needed."""
        if self._completed:
            raise ResponseAlreadyStartedException("Response is already complete", code="RESPONSE_COMPLETED")
        await self.start()
        self._body += chunk.encode("utf-8") if isinstance(chunk, str) else chunk
        await self._flush(more_body=True)

    async def complete(self) -> None:
        """Finish the response. Safe to call more than once."""
        if self._completed:
            return
        if not self._started:
            if "content-length" not in self._headers:
                self._headers["content-length"] = str(len(self._body))
            await self.start()
        await self._flush(more_body=False)
        self._completed = True

    async def _flush(self, more_body: bool) -> None:
        pending = bytes(self._body[self._flushed :])
        self._flushed = len(self._body)
        if self._send is not None:
            await self._send({"type": "http.response.body", "body": pending, "more_body": more_body})

    def _ensure_not_started(self, what: str) -> None:
        if self._started:
            raise ResponseAlreadyStartedException(
                f"Cannot modify {what}: the response has already started",
                code="RESPONSE_STARTED",
                context={"status_code": self._status_code},
            )


class HttpContext:
    """One in-flight HTTP exchange: request, response and per-request items."""

    def __init__(self, request: Request, response: HttpResponse | None = None) -> None:
        self.request = request
        self.response = response if response is not None else HttpResponse()
        self.items: dict[str, Any] = {}

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive, send: Send) -> HttpContext:
        return cls(Request(scope, receive), HttpResponse(send))

    def __repr__(self) -> str:
        return (
            f"HttpContext(method={self.request.method!r}, path={self.request.url.path!r}, "
            f"status_code={self.response.status_code}, has_started={self.response.has_started})"
        )
