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
"""Interception configuration properties."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from pyweave.container.types import Lifetime
from pyweave.core.config import config_properties


@config_properties(prefix="pyweave.interception")
class InterceptionProperties(BaseModel):
    """Configuration for interception registration (pyweave.interception.*)."""

    model_config = ConfigDict(frozen=True)

    interceptor_lifetime: Lifetime = Lifetime.SCOPED
    auto_discover: bool = True

    @field_validator("interceptor_lifetime", mode="before")
    @classmethod
    def _parse_lifetime(cls, value: object) -> Lifetime:
        return Lifetime.parse(value)  # type: ignore[arg-type]
