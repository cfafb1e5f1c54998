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
"""Package scanner for auto-discovering interceptable service contracts."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
import types

from pyweave.interception.decorators import Interceptable


def find_interceptable_types(package_name: str) -> list[type]:
    """Find abstract service contracts deriving from :class:`Interceptable`.

    Args:
        package_name: Dotted package name to scan (e.g. "myapp.services").

    Returns:
        Contract classes in definition order, submodules included.
    """
    found: list[type] = []
    module = importlib.import_module(package_name)
    found.extend(scan_module_contracts(module))

    if hasattr(module, "__path__"):
        for _importer, modname, _ispkg in pkgutil.walk_packages(module.__path__, prefix=module.__name__ + "."):
            try:
                submodule = importlib.import_module(modname)
            except ImportError:
                continue
            found.extend(cls for cls in scan_module_contracts(submodule) if cls not in found)

    return found


def scan_module_contracts(module: types.ModuleType) -> list[type]:
    """Extract the abstract ``Interceptable`` contracts defined in a module."""
    classes: list[type] = []
    for _name, obj in inspect.getmembers(module, inspect.isclass):
        if (
            obj is not Interceptable
            and obj.__module__ == module.__name__
            and issubclass(obj, Interceptable)
            and inspect.isabstract(obj)
        ):
            classes.append(obj)
    return classes
