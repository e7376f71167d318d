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

from abc import ABC, abstractmethod
from typing import Any, Iterator

from ammpool.storage.types import _NOT_PROVIDED


class StorageLockedError(RuntimeError):
    """Raised when a locked storage is written to."""


class PoolStorage(ABC):
    """Key/value storage holding the state of the pool or of an asset ledger.

    Keys are strings and values must be immutable (ints, bytes, strs or tuples of them), so a value read from
    the storage can never be changed without going through `put()`.
    """

    def __init__(self) -> None:
        self._locked: bool = False

    def lock(self) -> None:
        """Lock the storage. Writes to a locked storage raise StorageLockedError."""
        self._locked = True

    def unlock(self) -> None:
        """Unlock the storage."""
        self._locked = False

    def is_locked(self) -> bool:
        return self._locked

    def check_if_locked(self) -> None:
        """Raise if this storage cannot be written to."""
        if self._locked:
            raise StorageLockedError('you cannot change any value while the storage is locked')

    @abstractmethod
    def get(self, key: str, *, default: Any = _NOT_PROVIDED) -> Any:
        """Return the value of the provided `key`.

        It raises KeyError if key is not found and no default is provided.
        """
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Store the `value` for the provided `key`."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete `key` from storage. Deleting a missing key is a no-op."""
        raise NotImplementedError

    @abstractmethod
    def iter_items(self, prefix: str = '') -> Iterator[tuple[str, Any]]:
        """Iterate over all (key, value) pairs whose key starts with `prefix`, sorted by key."""
        raise NotImplementedError

    def has_key(self, key: str) -> bool:
        try:
            self.get(key)
        except KeyError:
            return False
        return True

    @abstractmethod
    def commit(self) -> None:
        """Flush all local changes to the underlying storage."""
        raise NotImplementedError
