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
"""Decoration metadata — which interceptors apply to which members, in what order.

Markers are read from four sites for every public method:

1. the implementation's method (and the methods it overrides),
2. the implementation class (and its base classes),
3. the contract's method,
4. the contract class.

The same interceptor type contributes once, first site wins for its options.
The merged markers are sorted by interceptor order; the sort is stable, so
interceptors sharing an order keep the precedence above.

The scan is a pure function of class metadata and is cached per
``(contract, implementation)`` pair for the life of the process.
"""

from __future__ import annotations

import inspect
import threading
import typing
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, get_args, get_origin

from pyweave.interception.decorators import Decoration, get_declared_decorations
from pyweave.interception.interceptor import get_interception_order


@dataclass(frozen=True)
class MemberDecoration:
    """Resolved metadata of one decorated member."""

    name: str
    method: Any
    method_implementation: Any
    decorations: tuple[Decoration, ...]
    type_parameters: tuple[Any, ...] = ()

    @property
    def interceptor_types(self) -> tuple[type, ...]:
        return tuple(d.interceptor_type for d in self.decorations)

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.method_implementation)

    def infer_generic_arguments(self, target: Any, args: Any, kwargs: Any) -> tuple[Any, ...]:
        """Infer the concrete type arguments of a generic member from a call.

        A parameter annotated ``T`` binds ``T`` to the argument's type; one
        annotated ``type[T]`` binds ``T`` to the argument itself. Parameters
        that cannot be inferred are reported as ``typing.Any``.
        """
        if not self.type_parameters:
            return ()

        try:
            bound = inspect.signature(self.method_implementation).bind(target, *args, **kwargs)
        except TypeError:
            return tuple(Any for _ in self.type_parameters)

        hints = _type_hints(self.method_implementation)
        inferred: dict[Any, Any] = {}
        for name, value in bound.arguments.items():
            annotation = hints.get(name)
            if annotation is None:
                continue
            param = bound.signature.parameters[name]
            if param.kind is inspect.Parameter.VAR_KEYWORD:
                continue
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                if not value:
                    continue
                value = value[0]
            if annotation in self.type_parameters:
                inferred.setdefault(annotation, type(value))
            elif get_origin(annotation) is type:
                inner = get_args(annotation)
                if inner and inner[0] in self.type_parameters and isinstance(value, type):
                    inferred.setdefault(inner[0], value)

        return tuple(inferred.get(tp, Any) for tp in self.type_parameters)


class MethodDecorationMap:
    """Decorated members of one ``(contract, implementation)`` pair.

    Obtain instances through :meth:`for_types`, which caches them.
    """

    _cache: ClassVar[dict[tuple[type, type], MethodDecorationMap]] = {}
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, contract: type, implementation: type) -> None:
        self.contract = contract
        self.implementation = implementation
        self._members: dict[str, MemberDecoration] = {}
        for name in _public_function_names(implementation):
            member = _resolve_member(contract, implementation, name)
            if member is not None:
                self._members[name] = member

    @classmethod
    def for_types(cls, contract: type | None, implementation: type) -> MethodDecorationMap:
        """Return the cached map for the pair, scanning it on first use."""
        key = (contract or implementation, implementation)
        existing = cls._cache.get(key)
        if existing is not None:
            return existing
        with cls._lock:
            existing = cls._cache.get(key)
            if existing is None:
                existing = cls(key[0], implementation)
                cls._cache[key] = existing
            return existing

    @classmethod
    def clear(cls) -> None:
        """Drop every cached map."""
        with cls._lock:
            cls._cache.clear()

    def get(self, name: str) -> MemberDecoration | None:
        return self._members.get(name)

    @property
    def members(self) -> dict[str, MemberDecoration]:
        return dict(self._members)

    @property
    def is_decorated(self) -> bool:
        return bool(self._members)

    def __contains__(self, name: object) -> bool:
        return name in self._members

    def __iter__(self) -> Iterator[MemberDecoration]:
        return iter(self._members.values())

    def __len__(self) -> int:
        return len(self._members)


def resolve_decorations(contract: type | None, implementation: type, name: str) -> tuple[Decoration, ...]:
    """Return the ordered, de-duplicated markers for one member (empty if none)."""
    member = MethodDecorationMap.for_types(contract, implementation).get(name)
    return member.decorations if member is not None else ()


def register_decorations(*types: type | tuple[type, type]) -> dict[tuple[type, type], bool]:
    """Scan and cache the metadata of service types ahead of first use.

    Each item is an implementation type, or a ``(contract, implementation)``
    pair. Returns, per pair, whether it carries decorated members.
    """
    result: dict[tuple[type, type], bool] = {}
    for item in types:
        contract, implementation = item if isinstance(item, tuple) else (item, item)
        result[(contract, implementation)] = MethodDecorationMap.for_types(contract, implementation).is_decorated
    return result


def is_decorated(contract: type | None, implementation: type | None = None) -> bool:
    """Whether any public method of the pair carries a marker."""
    implementation = implementation or contract
    if implementation is None:
        return False
    return MethodDecorationMap.for_types(contract, implementation).is_decorated


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


def _lookup(cls: type, name: str) -> tuple[type | None, Any]:
    """Find the class that defines *name* along the MRO and its raw attribute."""
    for klass in cls.__mro__:
        if name in vars(klass):
            return klass, vars(klass)[name]
    return None, None


def _public_function_names(cls: type) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for klass in cls.__mro__:
        for name in vars(klass):
            if name.startswith("_") or name in seen:
                continue
            seen.add(name)
            if inspect.isfunction(_lookup(cls, name)[1]):
                names.append(name)
    return names


def _method_markers(cls: type, name: str) -> list[Decoration]:
    """Markers on *name* in every class of the MRO that defines it, most-derived first."""
    markers: list[Decoration] = []
    for klass in cls.__mro__:
        raw = vars(klass).get(name)
        if inspect.isfunction(raw):
            markers.extend(get_declared_decorations(raw))
    return markers


def _class_markers(cls: type) -> list[Decoration]:
    markers: list[Decoration] = []
    for klass in cls.__mro__:
        markers.extend(get_declared_decorations(klass))
    return markers


def _resolve_member(contract: type, implementation: type, name: str) -> MemberDecoration | None:
    owner, method_implementation = _lookup(implementation, name)
    if owner is None or not inspect.isfunction(method_implementation):
        return None

    candidates = _method_markers(implementation, name) + _class_markers(implementation)

    method = method_implementation
    if contract is not implementation:
        _, declared = _lookup(contract, name)
        if inspect.isfunction(declared):
            method = declared
            candidates += _method_markers(contract, name) + _class_markers(contract)

    merged: dict[type, Decoration] = {}
    for decoration in candidates:
        merged.setdefault(decoration.interceptor_type, decoration)
    if not merged:
        return None

    ordered = sorted(merged.values(), key=lambda d: get_interception_order(d.interceptor_type))
    return MemberDecoration(
        name=name,
        method=method,
        method_implementation=method_implementation,
        decorations=tuple(ordered),
        type_parameters=_type_parameters(method_implementation, owner),
    )


def _type_hints(func: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception:
        return {k: v for k, v in getattr(func, "__annotations__", {}).items() if not isinstance(v, str)}


def _collect_type_vars(annotation: Any, found: list[Any]) -> None:
    if isinstance(annotation, TypeVar):
        if annotation not in found:
            found.append(annotation)
        return
    for arg in get_args(annotation):
        _collect_type_vars(arg, found)


def _type_parameters(func: Any, owner: type) -> tuple[Any, ...]:
    """Type parameters of a function, excluding those of its owning class."""
    declared = getattr(func, "__type_params__", ())
    if declared:
        return tuple(declared)

    class_params = set(getattr(owner, "__parameters__", ())) | set(getattr(owner, "__type_params__", ()))
    hints = _type_hints(func)
    found: list[Any] = []
    for name in inspect.signature(func).parameters:
        if name in hints:
            _collect_type_vars(hints[name], found)
    if "return" in hints:
        _collect_type_vars(hints["return"], found)
    return tuple(tp for tp in found if tp not in class_params)
