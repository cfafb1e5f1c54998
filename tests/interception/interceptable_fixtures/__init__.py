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
"""Package scanned by the interception scanner tests."""

from abc import ABC, abstractmethod

from pyweave.interception import Call, Interceptable, decorate


class AuditInterceptor:
    interception_order = 0
    seen: list[str] = []

    async def on_invoke(self, call: Call) -> None:
        AuditInterceptor.seen.append(call.method_name)
        await call.next()


class InventoryService(Interceptable, ABC):
    @decorate(AuditInterceptor)
    @abstractmethod
    def reserve(self, sku: str) -> bool: ...


class InMemoryInventory(InventoryService):
    def reserve(self, sku: str) -> bool:
        return True
