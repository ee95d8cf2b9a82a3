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
"""Job: a cold, composable asynchronous computation.

A ``Job`` only describes work: nothing runs until the job is awaited,
``run()`` is called, or it is started with ``start_as_task``. Each run
re-executes the description, except for jobs built with ``of_awaitable``,
which wrap a single underlying future. Concurrent combinators use anyio
task groups and cancel scopes.

Usage::

    @job
    async def load_user(user_id: str) -> User:
        ...

    profile = load_user("42").map(to_profile).timeout(2.0)
    result = await profile
"""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable, Generator, Iterable
from typing import Any, Generic, ParamSpec, TypeVar

import anyio

T = TypeVar("T")
U = TypeVar("U")
P = ParamSpec("P")
F = TypeVar("F", bound="asyncio.Future[Any]")

# Started jobs are strongly referenced until done so the loop cannot drop them.
_started: set[asyncio.Future[Any]] = set()


def _keep(future: F) -> F:
    _started.add(future)
    future.add_done_callback(_started.discard)
    return future


class Job(Generic[T]):
    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Awaitable[T]]) -> None:
        self._factory = factory

    @classmethod
    def result(cls, value: T) -> Job[T]:
        async def _result() -> T:
            return value

        return cls(_result)

    @classmethod
    def from_task(cls, factory: Callable[[], Awaitable[T]]) -> Job[T]:
        """Job that calls *factory* on every run and awaits what it returns."""
        return cls(factory)

    @classmethod
    def of_awaitable(cls, awaitable: Awaitable[T]) -> Job[T]:
        """Job over an existing awaitable.

        Inside a running loop the awaitable is scheduled immediately, so a
        coroutine that was already created runs even if the job is never
        awaited. Outside a loop it is scheduled on the first run. Every run
        awaits the same future, so a coroutine is never awaited twice.
        """
        future: asyncio.Future[T] | None = None
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            future = _keep(asyncio.ensure_future(awaitable))

        async def _await() -> T:
            nonlocal future
            if future is None:
                future = asyncio.ensure_future(awaitable)
            return await future

        return cls(_await)

    @classmethod
    def delay(cls, fn: Callable[[], Job[T]]) -> Job[T]:
        """Defer building the job until it runs."""
        return cls(lambda: fn().run())

    @classmethod
    def thunk(cls, fn: Callable[[], T]) -> Job[T]:
        async def _thunk() -> T:
            return fn()

        return cls(_thunk)

    @staticmethod
    def con_collect(jobs: Iterable[Job[T]]) -> Job[list[T]]:
        """Run *jobs* concurrently in one task group; results keep input order.

        A failing job cancels its siblings and the failure surfaces as an
        ``ExceptionGroup`` from the task group.
        """
        pending = list(jobs)

        async def _collect() -> list[T]:
            results: list[Any] = [None] * len(pending)

            async def _run_one(index: int, item: Job[T]) -> None:
                results[index] = await item.run()

            async with anyio.create_task_group() as tg:
                for index, item in enumerate(pending):
                    tg.start_soon(_run_one, index, item)
            return results

        return Job(_collect)

    def map(self, fn: Callable[[T], U]) -> Job[U]:
        async def _map() -> U:
            return fn(await self.run())

        return Job(_map)

    def bind(self, fn: Callable[[T], Job[U]]) -> Job[U]:
        async def _bind() -> U:
            return await fn(await self.run()).run()

        return Job(_bind)

    def timeout(self, seconds: float) -> Job[T]:
        """Fail with ``TimeoutError`` if a run takes longer than *seconds*."""

        async def _timeout() -> T:
            with anyio.fail_after(seconds):
                return await self.run()

        return Job(_timeout)

    async def run(self) -> T:
        return await self._factory()

    def __await__(self) -> Generator[Any, None, T]:
        return self.run().__await__()

    def start_as_task(self, name: str | None = None) -> asyncio.Task[T]:
        """Schedule the job on the running loop and return its task without waiting.

        Cancelling the task cancels the job.
        """
        return _keep(asyncio.get_running_loop().create_task(self.run(), name=name))

    def __repr__(self) -> str:
        name = getattr(self._factory, "__qualname__", type(self._factory).__name__)
        return f"Job({name})"


def job(fn: Callable[P, Awaitable[T]]) -> Callable[P, Job[T]]:
    """Decorator turning an ``async def`` into a function that returns a ``Job``.

    Calling the decorated function captures the arguments; the body runs
    each time the returned job runs.
    """

    @functools.wraps(fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Job[T]:
        return Job(lambda: fn(*args, **kwargs))

    return wrapper


def start_as_task(item: Job[T], name: str | None = None) -> asyncio.Task[T]:
    return item.start_as_task(name=name)
