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
"""Container exceptions — registration and resolution failures."""

from __future__ import annotations

from pyweave.kernel.exceptions import InfrastructureException


def _type_name(tp: object) -> str:
    return getattr(tp, "__name__", repr(tp))


class ContainerException(InfrastructureException):
    """Base class for errors raised by the DI container."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message=message, code=code)


class InvalidRegistrationError(ContainerException, TypeError):
    """A service descriptor was described with inconsistent arguments."""

    def __init__(self, service_type: object, reason: str) -> None:
        self.service_type = service_type
        self.reason = reason
        super().__init__(
            f"Invalid registration for '{_type_name(service_type)}': {reason}",
            code="CONTAINER_INVALID_REGISTRATION",
        )


class NoSuchServiceError(ContainerException):
    """No service is registered for the requested type."""

    def __init__(
        self,
        *,
        service_type: object,
        required_by: str | None = None,
        parameter: str | None = None,
        suggestions: list[str] | None = None,
    ) -> None:
        self.service_type = service_type
        self.required_by = required_by
        self.parameter = parameter
        self.suggestions = suggestions or []

        headline = f"No service of type '{_type_name(service_type)}' is registered"
        lines = [f"NoSuchServiceError: {headline}"]

        if required_by or parameter:
            lines.append("")
            if required_by:
                lines.append(f"  Required by: {required_by}")
            if parameter:
                lines.append(f"    Parameter: {parameter}")

        lines.append("")
        lines.append("  Suggestions:")
        lines.append("    - Register it with services.add_singleton/add_scoped/add_transient")
        lines.append("    - Interceptor types must be registered too (builder.with_interceptor)")

        if self.suggestions:
            lines.append("")
            lines.append(f"  Similar registered types: {', '.join(self.suggestions)}")

        super().__init__("\n".join(lines), code="CONTAINER_NO_SUCH_SERVICE")
        self.headline = headline


class CircularDependencyError(ContainerException):
    """Circular dependency detected during service construction.

    The ``chain`` attribute contains the dependency path in resolution order.
    """

    def __init__(self, *, chain: list[type], current: type) -> None:
        self.chain = chain
        self.current = current

        chain_names = [_type_name(t) for t in chain]
        chain_names.append(_type_name(current))
        headline = f"Circular dependency: {' -> '.join(chain_names)}"

        lines = [f"CircularDependencyError: {headline}"]
        lines.append("")
        lines.append("  Suggestion: Break the cycle with a factory registration")

        super().__init__("\n".join(lines), code="CONTAINER_CIRCULAR_DEPENDENCY")
        self.headline = headline
