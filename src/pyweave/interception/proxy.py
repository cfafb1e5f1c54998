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
"""Interception proxies — route decorated members through their interceptor chain."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from pyweave.container.scope import active_scope
from pyweave.interception.chain import invoke_chain, run_synchronously
from pyweave.interception.exceptions import InvalidInterceptorError
from pyweave.interception.metadata import MemberDecoration, MethodDecorationMap
from pyweave.interception.types import Call

if TYPE_CHECKING:
    from pyweave.container.container import ServiceProvider

logger = logging.getLogger(__name__)

InterceptorFactory = Callable[[type], Any]


def _instantiate(interceptor_type: type) -> Any:
    return interceptor_type()


class InterceptionProxy:
    """Stand-in for a service instance whose members carry interceptors.

    Attribute access is forwarded to the target. Decorated members come back
    as intercepting callables; everything else is the target's own attribute.
    The proxy reports the target's class, so ``isinstance`` checks against
    the contract keep working. Use :func:`pyweave.interception.unwrap` to
    reach the target.
    """

    __slots__ = ("__target", "__contract", "__factory", "__decorations", "__wrappers")

    def __init__(
        self,
        target: Any,
        contract: type,
        factory: ProxyFactory,
        decorations: MethodDecorationMap,
    ) -> None:
        object.__setattr__(self, "_InterceptionProxy__target", target)
        object.__setattr__(self, "_InterceptionProxy__contract", contract)
        object.__setattr__(self, "_InterceptionProxy__factory", factory)
        object.__setattr__(self, "_InterceptionProxy__decorations", decorations)
        object.__setattr__(self, "_InterceptionProxy__wrappers", {})

    @property  # type: ignore[misc]
    def __class__(self) -> type:
        return type(self.__target)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_InterceptionProxy__"):
            raise AttributeError(name)
        target = self.__target
        wrapper = self.__wrappers.get(name)
        if wrapper is not None:
            return wrapper
        member = self.__decorations.get(name)
        if member is None:
            return getattr(target, name)
        wrapper = _build_wrapper(target, member, self.__factory)
        self.__wrappers[name] = wrapper
        return wrapper

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self.__target, name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self.__target, name)

    def __dir__(self) -> list[str]:
        return dir(self.__target)

    def __repr__(self) -> str:
        return repr(self.__target)

    def __str__(self) -> str:
        return str(self.__target)

    def __eq__(self, other: object) -> bool:
        return bool(self.__target == target_of(other))

    def __ne__(self, other: object) -> bool:
        return bool(self.__target != target_of(other))

    def __hash__(self) -> int:
        return hash(self.__target)

    def __bool__(self) -> bool:
        return bool(self.__target)

    def __len__(self) -> int:
        return len(self.__target)

    def __iter__(self) -> Any:
        return iter(self.__target)

    def __contains__(self, item: object) -> bool:
        return item in self.__target

    def __getitem__(self, key: Any) -> Any:
        return self.__target[key]

    def __setitem__(self, key: Any, value: Any) -> None:
        self.__target[key] = value

    def __delitem__(self, key: Any) -> None:
        del self.__target[key]


def target_of(obj: Any) -> Any:
    """Return the target behind *obj* if it is a proxy, else *obj*."""
    if type(obj) is InterceptionProxy:
        return object.__getattribute__(obj, "_InterceptionProxy__target")
    return obj


class ProxyFactory:
    """Creates :class:`InterceptionProxy` instances.

    ``interceptor_factory`` turns an interceptor type into an instance and is
    called for every decorated invocation. The default instantiates the type
    with no arguments; :meth:`from_provider` resolves it from the DI scope
    active for the call.
    """

    def __init__(self, interceptor_factory: InterceptorFactory | None = None) -> None:
        self._interceptor_factory = interceptor_factory or _instantiate

    @classmethod
    def from_provider(cls, provider: ServiceProvider) -> ProxyFactory:
        """Resolve interceptors from the active scope, falling back to *provider*.

        A scope entered for another container is ignored.
        """
        root = provider.root

        def resolve(interceptor_type: type) -> Any:
            scope = active_scope()
            source = scope if scope is not None and scope.root is root else provider
            return source.resolve(interceptor_type)

        return cls(resolve)

    def create_proxy(self, target: Any, contract: type | None = None) -> Any:
        """Wrap *target* so that its decorated members are intercepted.

        *contract* is the service type the target is exposed as; markers
        declared on it apply alongside the implementation's own. An existing
        proxy is unwrapped first, so proxies never nest.
        """
        if target is None:
            raise TypeError("Cannot create an interception proxy for None")
        target = target_of(target)
        implementation = type(target)
        contract = contract if isinstance(contract, type) else implementation
        decorations = MethodDecorationMap.for_types(contract, implementation)
        logger.debug(
            "Created interception proxy for %s as %s (%d decorated members)",
            implementation.__qualname__,
            contract.__qualname__,
            len(decorations),
        )
        return InterceptionProxy(target, contract, self, decorations)

    def resolve_interceptors(self, member: MemberDecoration) -> list[Any]:
        """Resolve one interceptor instance per decoration of *member*, in order."""
        interceptors: list[Any] = []
        for interceptor_type in member.interceptor_types:
            interceptor = self._interceptor_factory(interceptor_type)
            if not callable(getattr(interceptor, "on_invoke", None)):
                raise InvalidInterceptorError(interceptor_type, interceptor)
            interceptors.append(interceptor)
        return interceptors


def _build_wrapper(target: Any, member: MemberDecoration, factory: ProxyFactory) -> Callable[..., Any]:
    """Build the intercepting callable for one decorated member of *target*."""
    original = getattr(target, member.name)

    def start(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Coroutine[Any, Any, Any]:
        call = Call(
            target=target,
            method=member.method,
            method_implementation=member.method_implementation,
            method_name=member.name,
            args=list(args),
            kwargs=dict(kwargs),
            generic_arguments=member.infer_generic_arguments(target, args, kwargs),
            decorations=member.decorations,
        )
        return invoke_chain(call, factory.resolve_interceptors(member), original)

    if member.is_async:

        @functools.wraps(original)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            return await start(args, kwargs)

        return async_wrapper

    @functools.wraps(original)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        return run_synchronously(start(args, kwargs))

    return sync_wrapper
