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
"""Interception core types — the Call context."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from pyweave.interception.decorators import Decoration


async def _unbound_next() -> Any:
    raise RuntimeError("Call.next() used outside of an interceptor chain")


@dataclass(eq=False)
class Call:
    """One in-flight invocation of a decorated member.

    Attributes:
        target: The undecorated instance the call eventually reaches.
        method: The function as declared on the service contract.
        method_implementation: The function that actually executes; the same
            object as ``method`` unless the implementation overrides it.
        method_name: Name of the member being called.
        args: Positional arguments, excluding ``self``. Interceptors may
            rewrite them before calling ``next()``.
        kwargs: Keyword arguments, rewritable the same way.
        generic_arguments: Concrete type arguments inferred for a generic
            member, empty otherwise.
        decorations: The ordered markers that built the chain.
        return_value: Set by the member once reached; interceptors may
            overwrite it, or pre-set it and stop the chain.
        exception: Exception raised by the latest run of the member.
        proceed_to_original_invocation: When False, ``next()`` returns
            ``return_value`` without running anything further.
        next: Awaitable continuation running the rest of the chain.
    """

    target: Any
    method: Callable[..., Any]
    method_implementation: Callable[..., Any]
    method_name: str
    args: list[Any]
    kwargs: dict[str, Any]
    generic_arguments: tuple[Any, ...] = ()
    decorations: tuple[Decoration, ...] = ()
    return_value: Any = None
    exception: Exception | None = None
    proceed_to_original_invocation: bool = True
    next: Callable[[], Awaitable[Any]] = field(default=_unbound_next, repr=False)

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.method_implementation)

    def get_decoration(self, interceptor_type: type) -> Decoration | None:
        """Return the marker that put *interceptor_type* on this member."""
        for decoration in self.decorations:
            if decoration.interceptor_type is interceptor_type:
                return decoration
        return None
