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
"""Active DI scope backed by contextvars.

Entering a scope (``with provider.create_scope() as scope``) makes it the
active scope for the current thread or async task until the block exits.
Code that has no provider at hand (interceptor resolution inside a proxy)
reads it with :func:`active_scope`.
"""

from __future__ import annotations

from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pyweave.container.container import ServiceProvider

# Scopes entered by the current task, innermost last. Each task works on its
# own copy, so one scope may be entered by several tasks at once.
_entered_scopes_var: ContextVar[tuple[ServiceProvider, ...]] = ContextVar("pyweave_entered_scopes", default=())


def active_scope() -> ServiceProvider | None:
    """Return the innermost scope entered by the current task, or None."""
    entered = _entered_scopes_var.get()
    return entered[-1] if entered else None


def enter_scope(scope: ServiceProvider) -> None:
    _entered_scopes_var.set((*_entered_scopes_var.get(), scope))


def exit_scope(scope: ServiceProvider) -> None:
    """Leave the most recent entry of *scope* in the current task."""
    entered = list(_entered_scopes_var.get())
    for i in range(len(entered) - 1, -1, -1):
        if entered[i] is scope:
            del entered[i]
            break
    else:
        raise RuntimeError("Scope exited without being entered in this context")
    _entered_scopes_var.set(tuple(entered))
