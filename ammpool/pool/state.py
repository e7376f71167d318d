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

from typing import Iterator

from ammpool.storage import PoolStorage
from ammpool.types import Address, Amount, AssetId

_RESERVE_KEYS: dict[AssetId, str] = {
    AssetId.A: 'reserve_a',
    AssetId.B: 'reserve_b',
}
_TOTAL_SHARES_KEY = 'total_shares'
_SHARES_PREFIX = 'shares:'


class PoolState:
    """Reserve ledger and share ledger of a pool.

    This is a typed view over a storage. It holds no data itself, so the same storage can be wrapped by a
    changes tracker during a call and every change is committed or discarded with it.

    Zero share balances are not stored.
    """
    __slots__ = ('_storage',)

    def __init__(self, storage: PoolStorage) -> None:
        self._storage = storage

    @property
    def storage(self) -> PoolStorage:
        return self._storage

    def get_reserve(self, asset: AssetId) -> Amount:
        return Amount(self._storage.get(_RESERVE_KEYS[asset], default=0))

    def set_reserve(self, asset: AssetId, value: int) -> None:
        assert value >= 0, f'reserve {asset} cannot be negative'
        self._storage.put(_RESERVE_KEYS[asset], value)

    @property
    def reserve_a(self) -> Amount:
        return self.get_reserve(AssetId.A)

    @reserve_a.setter
    def reserve_a(self, value: int) -> None:
        self.set_reserve(AssetId.A, value)

    @property
    def reserve_b(self) -> Amount:
        return self.get_reserve(AssetId.B)

    @reserve_b.setter
    def reserve_b(self, value: int) -> None:
        self.set_reserve(AssetId.B, value)

    @property
    def total_shares(self) -> Amount:
        return Amount(self._storage.get(_TOTAL_SHARES_KEY, default=0))

    @total_shares.setter
    def total_shares(self, value: int) -> None:
        assert value >= 0, 'total shares cannot be negative'
        self._storage.put(_TOTAL_SHARES_KEY, value)

    def get_shares(self, provider: Address) -> Amount:
        return Amount(self._storage.get(_SHARES_PREFIX + provider.hex(), default=0))

    def set_shares(self, provider: Address, value: int) -> None:
        assert value >= 0, 'shares cannot be negative'
        key = _SHARES_PREFIX + provider.hex()
        if value == 0:
            self._storage.delete(key)
        else:
            self._storage.put(key, value)

    def iter_shares(self) -> Iterator[tuple[Address, Amount]]:
        """Iterate over all providers holding shares."""
        for key, value in self._storage.iter_items(_SHARES_PREFIX):
            yield Address(bytes.fromhex(key[len(_SHARES_PREFIX):])), Amount(value)

    def is_empty(self) -> bool:
        return self.total_shares == 0

    def verify_invariants(self) -> None:
        """Check the invariants that must hold after every operation. A failure is a bug."""
        reserve_a, reserve_b, total_shares = self.reserve_a, self.reserve_b, self.total_shares
        assert reserve_a >= 0 and reserve_b >= 0, 'negative reserve'
        assert total_shares == sum(shares for _, shares in self.iter_shares()), 'total shares mismatch'
        assert (reserve_a == 0) == (reserve_b == 0) == (total_shares == 0), (
            f'pool is partially funded: reserve_a={reserve_a} reserve_b={reserve_b} total_shares={total_shares}'
        )
