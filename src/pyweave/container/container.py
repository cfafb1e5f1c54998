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
"""Lightweight service provider with type-hint based constructor injection."""

from __future__ import annotations

import difflib
import inspect
import threading
import types
import typing
from collections.abc import Sequence
from contextvars import ContextVar
from typing import Any, TypeVar, Union, cast, get_args, get_origin

from pyweave.container.descriptor import DescriptorKind, ServiceDescriptor
from pyweave.container.exceptions import CircularDependencyError, NoSuchServiceError
from pyweave.container.scope import enter_scope, exit_scope
from pyweave.container.types import Lifetime

T = TypeVar("T")

# Implementation types currently under construction, per task.
_resolving_var: ContextVar[tuple[type, ...]] = ContextVar("pyweave_resolving", default=())


class ServiceProvider:
    """Resolves services from an immutable snapshot of descriptors.

    The provider returned by ``ServiceCollection.build_provider()`` is the
    root. ``create_scope()`` returns a child provider sharing the root's
    descriptors and singletons but holding its own scoped instances. The
    root also acts as a scope for ``SCOPED`` services resolved from it.

    Supports constructor injection via type hints, ``Optional[T]`` and
    ``list[T]`` parameter types, parameters with defaults, injection of the
    resolving ``ServiceProvider`` itself, and circular dependency detection.
    """

    def __init__(
        self,
        descriptors: Sequence[ServiceDescriptor],
        *,
        root: ServiceProvider | None = None,
    ) -> None:
        self._root: ServiceProvider = root or self
        self._descriptors: tuple[ServiceDescriptor, ...] = tuple(descriptors) if root is None else root._descriptors
        self._by_type: dict[Any, list[ServiceDescriptor]] = {}
        if root is None:
            for descriptor in self._descriptors:
                self._by_type.setdefault(descriptor.service_type, []).append(descriptor)
        else:
            self._by_type = root._by_type
        # SCOPED instances of this provider; for the root also SINGLETONs.
        self._instances: dict[ServiceDescriptor, Any] = {}
        self._lock = threading.RLock()

    @property
    def root(self) -> ServiceProvider:
        return self._root

    @property
    def is_root(self) -> bool:
        return self._root is self

    @property
    def descriptors(self) -> tuple[ServiceDescriptor, ...]:
        return self._descriptors

    # ------------------------------------------------------------------
    # Scopes
    # ------------------------------------------------------------------

    def create_scope(self) -> ServiceProvider:
        """Create a child scope. Enter it with ``with``/``async with`` to make it active."""
        return ServiceProvider((), root=self._root)

    def __enter__(self) -> ServiceProvider:
        enter_scope(self)
        return self

    def __exit__(self, *exc_info: object) -> None:
        exit_scope(self)

    async def __aenter__(self) -> ServiceProvider:
        return self.__enter__()

    async def __aexit__(self, *exc_info: object) -> None:
        self.__exit__(*exc_info)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def contains(self, service_type: Any) -> bool:
        return service_type in self._by_type

    def resolve(self, service_type: type[T]) -> T:
        """Resolve the last registration of *service_type*."""
        if service_type is ServiceProvider:
            return cast(T, self)

        candidates = self._by_type.get(service_type)
        if not candidates:
            raise NoSuchServiceError(
                service_type=service_type,
                suggestions=self._get_similar_type_names(getattr(service_type, "__name__", "")),
            )
        return cast(T, self._resolve_descriptor(candidates[-1]))

    def resolve_optional(self, service_type: type[T]) -> T | None:
        """Resolve *service_type*, or return None when it is not registered."""
        if service_type is not ServiceProvider and service_type not in self._by_type:
            return None
        return self.resolve(service_type)

    def resolve_all(self, service_type: type[T]) -> list[T]:
        """Resolve every registration of *service_type*, in registration order."""
        return [self._resolve_descriptor(d) for d in self._by_type.get(service_type, [])]

    def instantiate(self, descriptor: ServiceDescriptor) -> Any:
        """Produce a fresh instance for *descriptor*, bypassing lifetime caches.

        Instance-based descriptors return their pre-built instance.
        """
        if descriptor.kind is DescriptorKind.INSTANCE:
            return descriptor.instance
        if descriptor.kind is DescriptorKind.FACTORY:
            factory = cast(Any, descriptor.factory)
            return factory(self)
        return self._create_instance(cast(type, descriptor.implementation_type))

    def _resolve_descriptor(self, descriptor: ServiceDescriptor) -> Any:
        """Resolve a single descriptor, handling lifetime."""
        if descriptor.kind is DescriptorKind.INSTANCE:
            return descriptor.instance

        if descriptor.lifetime is Lifetime.TRANSIENT:
            return self.instantiate(descriptor)

        # Singletons live on the root and see only root-level dependencies.
        owner = self._root if descriptor.lifetime is Lifetime.SINGLETON else self
        with owner._lock:
            if descriptor in owner._instances:
                return owner._instances[descriptor]
            instance = owner.instantiate(descriptor)
            owner._instances[descriptor] = instance
            return instance

    def _create_instance(self, impl_type: type) -> Any:
        """Create an instance, resolving constructor dependencies."""
        chain = _resolving_var.get()
        if impl_type in chain:
            raise CircularDependencyError(chain=list(chain), current=impl_type)
        token = _resolving_var.set((*chain, impl_type))
        try:
            init = impl_type.__init__  # type: ignore[misc]
            if init is object.__init__:
                return impl_type()

            hints = typing.get_type_hints(init)
            hints.pop("return", None)
            sig = inspect.signature(init)

            kwargs: dict[str, Any] = {}
            for param_name, param_type in hints.items():
                param = sig.parameters.get(param_name)
                has_default = param is not None and param.default is not inspect.Parameter.empty
                try:
                    kwargs[param_name] = self._resolve_param(param_type)
                except NoSuchServiceError:
                    if has_default:
                        continue
                    raise NoSuchServiceError(
                        service_type=param_type,
                        required_by=f"{impl_type.__qualname__}.__init__()",
                        parameter=f"{param_name}: {getattr(param_type, '__name__', repr(param_type))}",
                        suggestions=self._get_similar_type_names(getattr(param_type, "__name__", "")),
                    ) from None

            return impl_type(**kwargs)
        finally:
            _resolving_var.reset(token)

    def _resolve_param(self, param_type: Any) -> Any:
        """Resolve a single parameter, handling Optional and list."""
        # Optional[T] (Union[T, None] or T | None via PEP 604)
        if get_origin(param_type) is Union or isinstance(param_type, types.UnionType):
            args = get_args(param_type)
            non_none = [a for a in args if a is not type(None)]
            if len(non_none) == 1:
                return self.resolve_optional(non_none[0])

        if get_origin(param_type) is list:
            args = get_args(param_type)
            if args:
                return self.resolve_all(args[0])

        # type[T] or bare `type`: class references cannot be auto-resolved
        if param_type is type or get_origin(param_type) is type:
            raise NoSuchServiceError(service_type=param_type)

        return self.resolve(param_type)

    def _get_similar_type_names(self, name: str) -> list[str]:
        """Return registered type names similar to *name* using fuzzy matching."""
        if not name:
            return []
        registered_names = [getattr(t, "__name__", repr(t)) for t in self._by_type]
        return difflib.get_close_matches(name, registered_names, n=5, cutoff=0.4)
