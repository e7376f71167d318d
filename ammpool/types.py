# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

from enum import Enum, unique
from typing import Any, Callable, NewType

# Types used by the pool.
Address = NewType('Address', bytes)
Amount = NewType('Amount', int)
Timestamp = NewType('Timestamp', int)

POOL_METHOD_TYPE_ATTR: str = '__pool_method_type'


@unique
class AssetId(Enum):
    """One of the two assets traded by the pool."""
    A = 'A'
    B = 'B'

    def __str__(self) -> str:
        return self.value

    def other(self) -> AssetId:
        """Return the opposite asset of the pair."""
        return AssetId.B if self is AssetId.A else AssetId.A


@unique
class PoolMethodType(Enum):
    PUBLIC = 'public'
    VIEW = 'view'


def public(fn: Callable) -> Callable:
    """Decorator to mark a pool method as public (state-changing, executed atomically)."""
    setattr(fn, POOL_METHOD_TYPE_ATTR, PoolMethodType.PUBLIC)
    return fn


def view(fn: Callable) -> Callable:
    """Decorator to mark a pool method as view (read-only)."""
    setattr(fn, POOL_METHOD_TYPE_ATTR, PoolMethodType.VIEW)
    return fn


def get_method_type(method: Any) -> PoolMethodType | None:
    """Return how a method has been marked, or None when it is not exposed."""
    return getattr(method, POOL_METHOD_TYPE_ATTR, None)


def is_public_method(method: Any) -> bool:
    return get_method_type(method) is PoolMethodType.PUBLIC


def is_view_method(method: Any) -> bool:
    return get_method_type(method) is PoolMethodType.VIEW
