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

from ammpool.storage.base_storage import PoolStorage, StorageLockedError
from ammpool.storage.types import _NOT_PROVIDED, DeletedKey


class ChangesTracker(PoolStorage):
    """Keep track of changes during the execution of a pool call.

    These changes are not committed to the storage until `commit()` is called. A tracker that has been
    committed or blocked cannot be changed anymore."""

    def __init__(self, storage: PoolStorage):
        super().__init__()
        self.storage = storage
        self.data: dict[str, Any] = {}

        self.has_been_commited = False
        self.has_been_blocked = False

    @override
    def check_if_locked(self) -> None:
        """Check if this instance can still be changed."""
        if self.has_been_commited:
            raise StorageLockedError('you cannot change any value after the commit has been executed')
        elif self.has_been_blocked:
            raise StorageLockedError('you cannot change any value after the changes have been blocked')
        super().check_if_locked()

    def block(self) -> None:
        """Block the changes and prevent them from being committed."""
        self.check_if_locked()
        self.has_been_blocked = True

    @override
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        if key in self.data:
            value = self.data[key]
        else:
            value = self.storage.get(key, default=default)
        if value is DeletedKey:
            if default is _NOT_PROVIDED:
                raise KeyError(key)
            return default
        return value

    @override
    def put(self, key: str, value: Any) -> None:
        self.check_if_locked()
        self.data[key] = value

    @override
    def delete(self, key: str) -> None:
        self.check_if_locked()
        self.data[key] = DeletedKey

    @override
    def iter_items(self, prefix: str = '') -> Iterator[tuple[str, Any]]:
        merged = dict(self.storage.iter_items(prefix))
        for key, value in self.data.items():
            if key.startswith(prefix):
                merged[key] = value
        for key in sorted(merged):
            value = merged[key]
            if value is not DeletedKey:
                yield key, value

    @override
    def commit(self) -> None:
        """Save the changes in the storage."""
        self.check_if_locked()
        for key, value in self.data.items():
            if value is not DeletedKey:
                self.storage.put(key, value)
            else:
                self.storage.delete(key)
        self.has_been_commited = True

    def reset(self) -> None:
        """Discard all local changes without persisting."""
        self.check_if_locked()
        self.data = {}

    def is_empty(self) -> bool:
        return not bool(self.data)
