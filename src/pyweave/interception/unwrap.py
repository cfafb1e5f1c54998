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
"""Unwrap accessor — reach the instance behind an interception proxy."""

from __future__ import annotations

from typing import Any

from pyweave.interception.proxy import InterceptionProxy, target_of


def unwrap(obj: Any) -> Any:
    """Return the undecorated instance behind *obj*, or *obj* itself.

    Never raises; anything that is not an interception proxy, ``None``
    included, is returned unchanged.
    """
    return target_of(obj)


def is_proxy(obj: Any) -> bool:
    """Whether *obj* is an interception proxy."""
    return type(obj) is InterceptionProxy
