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
"""ServiceCollection — the ordered, mutable list of service descriptors."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from pyweave.container.descriptor import ServiceDescriptor, ServiceFactory
from pyweave.container.exceptions import InvalidRegistrationError
from pyweave.container.types import Lifetime

if TYPE_CHECKING:
    from pyweave.container.container import ServiceProvider


class ServiceCollection:
    """Ordered registrations from which a :class:`ServiceProvider` is built.

    Usage::

        services = ServiceCollection()
        services.add_singleton(Clock)
        services.add_scoped(OrderRepository, SqlOrderRepository)
        services.add_transient(Mailer, factory=lambda sp: Mailer(sp.resolve(Settings)))
        provider = services.build_provider()

    Registration order matters: ``resolve`` returns the last registration of
    a service type and ``resolve_all`` returns all of them in order.
    """

    def __init__(self) -> None:
        self._descriptors: list[ServiceDescriptor] = []

    def add(self, descriptor: ServiceDescriptor) -> ServiceCollection:
        """Append a descriptor."""
        self._descriptors.append(descriptor)
        return self

    def try_add(self, descriptor: ServiceDescriptor) -> bool:
        """Append *descriptor* unless its service type is already registered."""
        if self.contains(descriptor.service_type):
            return False
        self._descriptors.append(descriptor)
        return True

    def add_singleton(
        self,
        service_type: type,
        implementation_type: type | None = None,
        *,
        instance: Any = None,
        factory: ServiceFactory | None = None,
    ) -> ServiceCollection:
        """Register a singleton by type, pre-built ``instance`` or ``factory``."""
        return self.add(self._describe(service_type, implementation_type, instance, factory, Lifetime.SINGLETON))

    def add_scoped(
        self,
        service_type: type,
        implementation_type: type | None = None,
        *,
        factory: ServiceFactory | None = None,
    ) -> ServiceCollection:
        """Register a scoped service by type or ``factory``."""
        return self.add(self._describe(service_type, implementation_type, None, factory, Lifetime.SCOPED))

    def add_transient(
        self,
        service_type: type,
        implementation_type: type | None = None,
        *,
        factory: ServiceFactory | None = None,
    ) -> ServiceCollection:
        """Register a transient service by type or ``factory``."""
        return self.add(self._describe(service_type, implementation_type, None, factory, Lifetime.TRANSIENT))

    def find(self, service_type: type) -> list[ServiceDescriptor]:
        """Return every descriptor registered for *service_type*, in order."""
        return [d for d in self._descriptors if d.service_type is service_type]

    def contains(self, service_type: type) -> bool:
        return any(d.service_type is service_type for d in self._descriptors)

    def index(self, descriptor: ServiceDescriptor) -> int:
        for i, existing in enumerate(self._descriptors):
            if existing is descriptor:
                return i
        raise ValueError(f"{descriptor!r} is not in the collection")

    def replace(self, old: ServiceDescriptor, new: ServiceDescriptor) -> None:
        """Replace *old* with *new*, keeping its position."""
        self._descriptors[self.index(old)] = new

    def remove_all(self, service_type: type) -> list[ServiceDescriptor]:
        """Remove and return every descriptor for *service_type*."""
        removed = self.find(service_type)
        self._descriptors = [d for d in self._descriptors if d.service_type is not service_type]
        return removed

    def build_provider(self) -> ServiceProvider:
        """Build a root provider from a snapshot of the current descriptors."""
        from pyweave.container.container import ServiceProvider

        return ServiceProvider(list(self._descriptors))

    def __iter__(self) -> Iterator[ServiceDescriptor]:
        return iter(list(self._descriptors))

    def __len__(self) -> int:
        return len(self._descriptors)

    def __getitem__(self, index: int) -> ServiceDescriptor:
        return self._descriptors[index]

    @staticmethod
    def _describe(
        service_type: type,
        implementation_type: type | None,
        instance: Any,
        factory: ServiceFactory | None,
        lifetime: Lifetime,
    ) -> ServiceDescriptor:
        given = sum(x is not None for x in (implementation_type, instance, factory))
        if given > 1:
            raise InvalidRegistrationError(
                service_type,
                "pass only one of implementation_type, instance or factory",
            )
        if instance is not None:
            return ServiceDescriptor.from_instance(service_type, instance)
        if factory is not None:
            return ServiceDescriptor.from_factory(service_type, factory, lifetime)
        return ServiceDescriptor.describe(service_type, implementation_type, lifetime)
