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
"""PyWeave Interception — decorate service methods with ordered interceptor chains.

Quick start::

    class TimingInterceptor:
        interception_order = 0

        async def on_invoke(self, call: Call) -> None:
            started = time.perf_counter()
            await call.next()
            logger.info("%s took %.3fs", call.method_name, time.perf_counter() - started)

    class Greeter:
        @decorate(TimingInterceptor)
        def greet(self, name: str) -> str:
            return f"Hello {name}"

    services = ServiceCollection()
    services.add_transient(Greeter)
    InterceptionBuilder(services).with_interceptor(TimingInterceptor).intercept(Greeter)
    provider = services.build_provider()
"""

from pyweave.interception.chain import invoke_chain, run_synchronously
from pyweave.interception.decorators import Decoration, Interceptable, decorate
from pyweave.interception.exceptions import (
    InterceptionException,
    InvalidInterceptorError,
    NoServiceToDecorateError,
)
from pyweave.interception.interceptor import Interceptor, get_interception_order
from pyweave.interception.metadata import (
    MemberDecoration,
    MethodDecorationMap,
    is_decorated,
    register_decorations,
    resolve_decorations,
)
from pyweave.interception.properties import InterceptionProperties
from pyweave.interception.proxy import InterceptionProxy, ProxyFactory
from pyweave.interception.registration import InterceptionBuilder, add_interception, intercept
from pyweave.interception.scanner import find_interceptable_types
from pyweave.interception.types import Call
from pyweave.interception.unwrap import is_proxy, unwrap

__all__ = [
    "Call",
    "Decoration",
    "Interceptable",
    "InterceptionBuilder",
    "InterceptionException",
    "InterceptionProperties",
    "InterceptionProxy",
    "Interceptor",
    "InvalidInterceptorError",
    "MemberDecoration",
    "MethodDecorationMap",
    "NoServiceToDecorateError",
    "ProxyFactory",
    "add_interception",
    "decorate",
    "find_interceptable_types",
    "get_interception_order",
    "intercept",
    "invoke_chain",
    "is_decorated",
    "is_proxy",
    "register_decorations",
    "resolve_decorations",
    "run_synchronously",
    "unwrap",
]
