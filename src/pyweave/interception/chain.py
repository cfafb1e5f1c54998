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
"""Chain invoker — runs interceptors around the original member.

The chain is always a coroutine. Async members await it; sync members block
on it through :func:`run_synchronously`, so interceptors may suspend freely
(sleep, wait_for, I/O) around a synchronous member too.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextvars
import inspect
from collections.abc import Callable, Coroutine, Sequence
from typing import Any

from pyweave.interception.types import Call


class _Chain:
    """Per-invocation continuation; ``call.next`` is its bound :meth:`proceed`."""

    def __init__(self, call: Call, interceptors: Sequence[Any], body: Callable[..., Any]) -> None:
        self.call = call
        self.interceptors = interceptors
        self.body = body
        self.is_async = inspect.iscoroutinefunction(body)
        self.position = -1

    async def proceed(self) -> Any:
        """Run the rest of the chain from the current position."""
        call = self.call
        if not call.proceed_to_original_invocation:
            return call.return_value

        position = self.position + 1
        if position < len(self.interceptors):
            await self._invoke_interceptor(position)
        else:
            await self._invoke_body()
        return call.return_value

    async def _invoke_interceptor(self, position: int) -> None:
        saved = self.position
        self.position = position
        try:
            result = self.interceptors[position].on_invoke(self.call)
            if inspect.isawaitable(result):
                await result
        finally:
            self.position = saved

    async def _invoke_body(self) -> None:
        call = self.call
        try:
            result = self.body(*call.args, **call.kwargs)
            if self.is_async:
                result = await result
        except Exception as exc:
            call.exception = exc
            raise
        call.exception = None
        call.return_value = result


async def invoke_chain(call: Call, interceptors: Sequence[Any], original_body: Callable[..., Any]) -> Any:
    """Run *interceptors* in order around *original_body* and return ``call.return_value``.

    Each interceptor continues the chain with ``await call.next()``. Awaiting
    it several times re-runs everything downstream, including the body.
    Exceptions from the body or any interceptor propagate unchanged.
    """
    chain = _Chain(call, list(interceptors), original_body)
    call.next = chain.proceed
    return await chain.proceed()


def run_synchronously(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run *coro* to completion on a private event loop and return its result.

    With no loop running on this thread the coroutine gets a fresh loop
    here. Inside a running loop it runs on a worker thread with its own loop
    and a copy of the caller's context, so the active DI scope stays
    visible. The calling thread blocks until the chain finishes.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    context = contextvars.copy_context()
    with concurrent.futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix="pyweave-sync") as pool:
        return pool.submit(context.run, asyncio.run, coro).result()
