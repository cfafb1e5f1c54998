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
"""Interception exceptions — registration and invocation-machinery failures.

Errors raised by intercepted methods or by interceptors themselves are never
wrapped in these types; they propagate to the caller unchanged.
"""

from __future__ import annotations

from pyweave.kernel.exceptions import InfrastructureException


def _type_name(tp: object) -> str:
    return getattr(tp, "__qualname__", None) or getattr(tp, "__name__", repr(tp))


class InterceptionException(InfrastructureException):
    """Base class for errors raised by the interception engine."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message=message, code=code)


class NoServiceToDecorateError(InterceptionException, ValueError):
    """``intercept`` was asked to decorate a type with no registration."""

    def __init__(self, service_type: object) -> None:
        self.service_type = service_type
        super().__init__(
            f"No registration of '{_type_name(service_type)}' to intercept; register the service before intercepting it",
            code="INTERCEPTION_NO_SERVICE",
        )


class InvalidInterceptorError(InterceptionException, TypeError):
    """The object resolved for an interceptor type cannot act as an interceptor."""

    def __init__(self, interceptor_type: object, resolved: object) -> None:
        self.interceptor_type = interceptor_type
        self.resolved = resolved
        super().__init__(
            f"'{_type_name(interceptor_type)}' resolved to {type(resolved).__name__!s} "
            f"which does not define on_invoke(call)",
            code="INTERCEPTION_INVALID_INTERCEPTOR",
        )

