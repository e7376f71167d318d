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

from typing import Any, final

from ammpool.types import Address, Timestamp


@final
class Context:
    """Context passed to a public method call.

    It identifies who is calling. Assets are not attached to the context: the pool pulls them from the caller
    through the asset ledgers during the call.
    """
    __slots__ = ('__caller_id', '__timestamp')
    __caller_id: Address
    __timestamp: Timestamp | None

    def __init__(self, *, caller_id: Address, timestamp: Timestamp | None = None) -> None:
        if not isinstance(caller_id, bytes) or not caller_id:
            raise TypeError(f'caller_id must be non-empty bytes, got {caller_id!r}')

        # Address calling the method.
        self.__caller_id = caller_id

        # Time of the call as seen by the host, if it provides one.
        self.__timestamp = timestamp

    @property
    def caller_id(self) -> Address:
        return self.__caller_id

    @property
    def timestamp(self) -> Timestamp | None:
        return self.__timestamp

    def copy(self) -> Context:
        """Return a copy of the context."""
        return Context(caller_id=self.caller_id, timestamp=self.timestamp)

    def to_json(self) -> dict[str, Any]:
        """Return a JSON representation of the context."""
        return {
            'caller_id': self.caller_id.hex(),
            'timestamp': self.timestamp,
        }
