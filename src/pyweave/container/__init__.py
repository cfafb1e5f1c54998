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
"""PyWeave Container — service descriptors, collection and provider."""

from pyweave.container.collection import ServiceCollection
from pyweave.container.container import ServiceProvider
from pyweave.container.descriptor import DescriptorKind, ServiceDescriptor, ServiceFactory
from pyweave.container.exceptions import (
    CircularDependencyError,
    ContainerException,
    InvalidRegistrationError,
    NoSuchServiceError,
)
from pyweave.container.ordering import HIGHEST_PRECEDENCE, LOWEST_PRECEDENCE, get_order, order
from pyweave.container.scope import active_scope
from pyweave.container.types import Lifetime

__all__ = [
    "HIGHEST_PRECEDENCE",
    "LOWEST_PRECEDENCE",
    "CircularDependencyError",
    "ContainerException",
    "DescriptorKind",
    "InvalidRegistrationError",
    "Lifetime",
    "NoSuchServiceError",
    "ServiceCollection",
    "ServiceDescriptor",
    "ServiceFactory",
    "ServiceProvider",
    "active_scope",
    "get_order",
    "order",
]
