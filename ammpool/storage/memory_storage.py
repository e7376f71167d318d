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

from typing import Any, Iterator

from typing_extensions import override

from ammpool.storage.base_storage import PoolStorage
from ammpool.storage.types import _NOT_PROVIDED


class MemoryStorage(PoolStorage):
    """Memory implementation of the storage."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        super().__init__()
        self._data: dict[str, Any] = dict(data) if data else {}

    @override
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        try:
            return self._data[key]
        except KeyError:
            if default is _NOT_PROVIDED:
                raise KeyError(key) from None
            return default

    @override
    def put(self, key: str, value: Any) -> None:
        self.check_if_locked()
        self._data[key] = value

    @override
    def delete(self, key: str) -> None:
        self.check_if_locked()
        self._data.pop(key, None)

    @override
    def iter_items(self, prefix: str = '') -> Iterator[tuple[str, Any]]:
        for key in sorted(self._data):
            if key.startswith(prefix):
                yield key, self._data[key]

    @override
    def commit(self) -> None:
        # Memory storage writes directly, there is nothing to flush.
        pass

    def to_dict(self) -> dict[str, Any]:
        """Return a copy of all stored data."""
        return dict(self._data)
