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

import copy
from abc import ABC, abstractmethod

from structlog import get_logger
from typing_extensions import Self

from ammpool.storage import MemoryStorage, PoolStorage
from ammpool.types import Address, Amount

logger = get_logger()


class AssetLedger(ABC):
    """Fungible asset ledger consumed by the pool.

    The pool only relies on two capabilities: pulling an amount the owner has authorized it to spend
    (`transfer_from`) and pushing an amount it holds (`transfer`). It never mints, burns or inspects the total
    supply of the traded assets.

    All the state of a ledger lives in its storage. During a pool call the runner gives the pool a copy of the
    ledger bound to a changes tracker (see `with_storage`), so transfers made by a failed call are discarded
    together with the pool changes.

    Implementations raise `TransferFailed` when they refuse a transfer.
    """

    def __init__(self, *, name: str, storage: PoolStorage | None = None) -> None:
        self.name = name
        self.storage: PoolStorage = storage if storage is not None else MemoryStorage()
        self.log = logger.new(asset=name)

    def with_storage(self, storage: PoolStorage) -> Self:
        """Return a copy of this ledger that reads from and writes to `storage`."""
        clone = copy.copy(self)
        clone.storage = storage
        return clone

    @abstractmethod
    def balance_of(self, owner: Address) -> Amount:
        """Return the balance of `owner`."""
        raise NotImplementedError

    @abstractmethod
    def allowance(self, owner: Address, spender: Address) -> Amount:
        """Return how much `spender` can still pull from `owner`."""
        raise NotImplementedError

    @abstractmethod
    def transfer(self, sender: Address, recipient: Address, amount: Amount) -> None:
        """Move `amount` from `sender` to `recipient`. Used by the pool to push assets it holds."""
        raise NotImplementedError

    @abstractmethod
    def transfer_from(self, spender: Address, owner: Address, recipient: Address, amount: Amount) -> None:
        """Move `amount` from `owner` to `recipient` on behalf of `spender`, consuming `spender`'s allowance.
        Used by the pool to pull assets from a caller."""
        raise NotImplementedError
