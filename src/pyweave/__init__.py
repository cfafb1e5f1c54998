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
"""PyWeave — method interception for dependency-injected Python services."""

from pyweave.container import Lifetime, ServiceCollection, ServiceProvider
from pyweave.interception import (
    Call,
    Interceptable,
    InterceptionBuilder,
    ProxyFactory,
    add_interception,
    decorate,
    intercept,
    unwrap,
)
from pyweave.logging import configure_logging

__version__ = "0.1.0"

__all__ = [
    "Call",
    "Interceptable",
    "InterceptionBuilder",
    "Lifetime",
    "ProxyFactory",
    "ServiceCollection",
    "ServiceProvider",
    "__version__",
    "add_interception",
    "configure_logging",
    "decorate",
    "intercept",
    "unwrap",
]
