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
"""Interceptor contract and ordering key."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pyweave.container.ordering import get_order

if TYPE_CHECKING:
    from pyweave.interception.types import Call


@runtime_checkable
class Interceptor(Protocol):
    """A cross-cutting behaviour wrapped around decorated members.

    ``interception_order`` positions the interceptor in the chain: lower
    values run first (outermost). ``on_invoke`` does its work, then usually
    ``await call.next()`` to continue; skipping ``next()`` or clearing
    ``call.proceed_to_original_invocation`` short-circuits the member.

    Interceptors are resolved from the DI container on every call, so they
    may take constructor dependencies and any lifetime.
    """

    interception_order: int

    async def on_invoke(self, call: Call) -> None: ...


def get_interception_order(interceptor_type: Any) -> int:
    """Return the ordering key of an interceptor type.

    The class attribute ``interception_order`` wins when it is an ``int``;
    otherwise the ``@order`` value is used, defaulting to 0.
    """
    value = getattr(interceptor_type, "interception_order", None)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return get_order(interceptor_type)
