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
"""Declaration surface — @decorate markers and the Interceptable base class."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

T = TypeVar("T")

DECORATIONS_ATTR = "__pyweave_decorations__"


@dataclass(frozen=True)
class Decoration:
    """One ``@decorate`` marker: an interceptor type plus its options.

    Options are free-form keyword arguments given to the marker; an
    interceptor reads them at invocation time through
    ``call.get_decoration(type(self))``.
    """

    interceptor_type: type
    options: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)


class Interceptable:
    """Marker base class for services that ``add_interception`` picks up automatically.

    Derive a contract or an implementation from it and every registration
    whose implementation is a subclass is intercepted without being listed
    explicitly.
    """

    __slots__ = ()


def decorate(interceptor_type: type, **options: Any) -> Callable[[T], T]:
    """Attach an interceptor to a method, or to every public method of a class.

    Markers stack; the same interceptor type declared again at another site
    (contract and implementation, method and class) runs only once::

        class OrderService(ABC):
            @decorate(AuditInterceptor, category="orders")
            @decorate(TimingInterceptor)
            @abstractmethod
            def place(self, order: Order) -> str: ...

    Execution order is decided by each interceptor type's
    ``interception_order``, not by the position of the marker.
    """
    if not isinstance(interceptor_type, type):
        raise TypeError(f"@decorate expects an interceptor class, got {interceptor_type!r}")

    decoration = Decoration(interceptor_type, dict(options))

    def decorator(target: T) -> T:
        if isinstance(target, type):
            existing = vars(target).get(DECORATIONS_ATTR, ())
        elif inspect.isfunction(target):
            existing = getattr(target, DECORATIONS_ATTR, ())
        else:
            raise TypeError(
                f"@decorate({interceptor_type.__name__}) can only mark functions or classes, got {target!r}"
            )
        # Decorators apply bottom-up; prepending keeps textual top-to-bottom order.
        setattr(target, DECORATIONS_ATTR, (decoration, *existing))
        return target

    return decorator


def get_declared_decorations(target: Any) -> tuple[Decoration, ...]:
    """Return the markers declared directly on a function or class."""
    if isinstance(target, type):
        return vars(target).get(DECORATIONS_ATTR, ())
    return getattr(target, DECORATIONS_ATTR, ())
