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
"""Registration rewriter — swap service registrations for proxy-producing factories."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pyweave.container.collection import ServiceCollection
from pyweave.container.container import ServiceProvider
from pyweave.container.descriptor import DescriptorKind, ServiceDescriptor
from pyweave.container.types import Lifetime
from pyweave.core.config import Config
from pyweave.interception.decorators import Interceptable
from pyweave.interception.exceptions import NoServiceToDecorateError
from pyweave.interception.metadata import MethodDecorationMap
from pyweave.interception.properties import InterceptionProperties
from pyweave.interception.proxy import ProxyFactory
from pyweave.interception.scanner import find_interceptable_types

logger = logging.getLogger(__name__)


def intercept(
    services: ServiceCollection,
    *service_types: type,
    proxy_factory: ProxyFactory | None = None,
) -> None:
    """Rewrite every registration of *service_types* to produce interception proxies.

    Each descriptor is replaced in place by a factory descriptor with the
    same service type and lifetime. Type and instance registrations whose
    implementation has no decorated members are left as they are; factory
    registrations are always rewritten since their product is unknown
    until resolution. The factory builds the instance exactly
    as the original registration would (constructing the implementation,
    returning the pre-built instance, or calling the original factory) and
    wraps it.

    Interceptors are resolved through *proxy_factory* when given, otherwise
    from the DI scope active for each call.

    Raises:
        NoServiceToDecorateError: a requested type has no registration. No
            descriptor is rewritten in that case.
    """
    matches: list[tuple[type, list[ServiceDescriptor]]] = []
    for service_type in service_types:
        descriptors = services.find(service_type)
        if not descriptors:
            raise NoServiceToDecorateError(service_type)
        matches.append((service_type, descriptors))

    for service_type, descriptors in matches:
        for descriptor in descriptors:
            if not _may_be_decorated(descriptor):
                logger.debug(
                    "Skipping %s registration of %s: no decorated members",
                    descriptor.lifetime.name.lower(),
                    getattr(service_type, "__qualname__", service_type),
                )
                continue
            services.replace(descriptor, _intercepted(descriptor, proxy_factory))
            logger.debug(
                "Intercepting %s registration of %s (%s)",
                descriptor.lifetime.name.lower(),
                getattr(service_type, "__qualname__", service_type),
                descriptor.kind.value,
            )


def _may_be_decorated(descriptor: ServiceDescriptor) -> bool:
    if descriptor.kind is DescriptorKind.FACTORY:
        return True
    return MethodDecorationMap.for_types(descriptor.service_type, _implementation_of(descriptor)).is_decorated


def _intercepted(descriptor: ServiceDescriptor, proxy_factory: ProxyFactory | None) -> ServiceDescriptor:
    contract = descriptor.service_type

    def create(provider: ServiceProvider) -> Any:
        proxies = proxy_factory or ProxyFactory.from_provider(provider)
        return proxies.create_proxy(provider.instantiate(descriptor), contract)

    return ServiceDescriptor.from_factory(contract, create, descriptor.lifetime)


class InterceptionBuilder:
    """Fluent helper for configuring interception on a service collection.

    Usage::

        (
            InterceptionBuilder(services)
            .with_interceptor(AuditInterceptor)
            .with_interceptor(CacheInterceptor, lifetime="singleton")
            .intercept(OrderService, PaymentService)
        )
    """

    def __init__(
        self,
        services: ServiceCollection,
        config: Config | None = None,
        proxy_factory: ProxyFactory | None = None,
    ) -> None:
        self.services = services
        self._config = config if config is not None else Config.defaults()
        self._properties = self._config.bind(InterceptionProperties)
        self._proxy_factory = proxy_factory

    @property
    def properties(self) -> InterceptionProperties:
        return self._properties

    def intercept(self, *service_types: type) -> InterceptionBuilder:
        """Intercept every registration of the given service types."""
        intercept(self.services, *service_types, proxy_factory=self._proxy_factory)
        return self

    def with_interceptor(
        self,
        interceptor_type: type,
        lifetime: Lifetime | str | None = None,
    ) -> InterceptionBuilder:
        """Register an interceptor type unless it is already registered.

        The lifetime defaults to ``pyweave.interception.interceptor_lifetime``.
        """
        if not self.services.contains(interceptor_type):
            resolved = Lifetime.parse(lifetime) if lifetime is not None else self._properties.interceptor_lifetime
            self.services.add(ServiceDescriptor.describe(interceptor_type, interceptor_type, resolved))
        return self


def add_interception(
    services: ServiceCollection,
    types: Iterable[type] = (),
    *,
    packages: Iterable[str] = (),
    config: Config | None = None,
) -> InterceptionBuilder:
    """Intercept explicit types, scanned contracts and ``Interceptable`` services.

    Call it after every service is registered. Types are collected from
    *types*, from the abstract ``Interceptable`` contracts found under
    *packages*, and, when ``pyweave.interception.auto_discover`` is on, from
    every registration whose implementation derives from ``Interceptable``.
    Duplicates are dropped and the first occurrence keeps its position.
    """
    builder = InterceptionBuilder(services, config)

    targets: list[type] = list(types)
    for package in packages:
        targets.extend(find_interceptable_types(package))
    if builder.properties.auto_discover:
        targets.extend(
            descriptor.service_type
            for descriptor in services
            if issubclass(_implementation_of(descriptor), Interceptable)
        )

    unique = list(dict.fromkeys(targets))
    logger.debug("Adding interception for %d service types", len(unique))
    return builder.intercept(*unique)


def _implementation_of(descriptor: ServiceDescriptor) -> type:
    if descriptor.kind is DescriptorKind.INSTANCE:
        return type(descriptor.instance)
    if descriptor.kind is DescriptorKind.TYPE and descriptor.implementation_type is not None:
        return descriptor.implementation_type
    return object
