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
"""Service registration metadata."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pyweave.container.exceptions import InvalidRegistrationError
from pyweave.container.types import Lifetime

if TYPE_CHECKING:
    from pyweave.container.container import ServiceProvider

ServiceFactory = Callable[["ServiceProvider"], Any]


class DescriptorKind(Enum):
    """How a descriptor produces its instance."""

    TYPE = "type"
    INSTANCE = "instance"
    FACTORY = "factory"


def _is_protocol(cls: type) -> bool:
    return bool(getattr(cls, "_is_protocol", False))


@dataclass(frozen=True, eq=False)
class ServiceDescriptor:
    """Metadata for one registered service.

    Exactly one of ``implementation_type``, ``instance`` or ``factory`` is
    set. Descriptors compare by identity: two registrations of the same
    types are still two distinct services.
    """

    service_type: type
    lifetime: Lifetime = Lifetime.SINGLETON
    implementation_type: type | None = None
    instance: Any = field(default=None, repr=False)
    factory: ServiceFactory | None = field(default=None, repr=False)

    @property
    def kind(self) -> DescriptorKind:
        if self.instance is not None:
            return DescriptorKind.INSTANCE
        if self.factory is not None:
            return DescriptorKind.FACTORY
        return DescriptorKind.TYPE

    @classmethod
    def describe(
        cls,
        service_type: type,
        implementation_type: type | None = None,
        lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> ServiceDescriptor:
        """Describe a type-based registration (the container constructs it)."""
        implementation = implementation_type or service_type
        if not isinstance(implementation, type):
            raise InvalidRegistrationError(service_type, "implementation must be a class")
        if (
            isinstance(service_type, type)
            and not _is_protocol(service_type)
            and not issubclass(implementation, service_type)
        ):
            raise InvalidRegistrationError(
                service_type,
                f"'{implementation.__name__}' is not a subclass of '{service_type.__name__}'",
            )
        return cls(service_type=service_type, lifetime=lifetime, implementation_type=implementation)

    @classmethod
    def from_instance(cls, service_type: type, instance: Any) -> ServiceDescriptor:
        """Describe a pre-built singleton instance."""
        if instance is None:
            raise InvalidRegistrationError(service_type, "instance must not be None")
        return cls(service_type=service_type, lifetime=Lifetime.SINGLETON, instance=instance)

    @classmethod
    def from_factory(
        cls,
        service_type: type,
        factory: ServiceFactory,
        lifetime: Lifetime = Lifetime.SINGLETON,
    ) -> ServiceDescriptor:
        """Describe a registration built by ``factory(provider)``."""
        if not callable(factory):
            raise InvalidRegistrationError(service_type, "factory must be callable")
        return cls(service_type=service_type, lifetime=lifetime, factory=factory)
