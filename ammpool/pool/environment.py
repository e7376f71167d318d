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

from typing import TYPE_CHECKING, Any, Mapping

from ammpool.exception import PoolFail, TransferFailed
from ammpool.pool.state import PoolState
from ammpool.types import Address, Amount, AssetId

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

    from ammpool.conf.settings import PoolSettings
    from ammpool.events import PoolEvent
    from ammpool.ledger import AssetLedger


class PoolEnvironment:
    """Everything a pool method can reach during a single call.

    The state and the ledgers given here are bound to the changes trackers of the call. Events are buffered and
    only published by the runner after the call is committed.
    """
    __slots__ = ('settings', 'state', 'pool_address', 'log', '_ledgers', '_events')

    def __init__(
        self,
        *,
        settings: PoolSettings,
        state: PoolState,
        ledgers: Mapping[AssetId, AssetLedger],
        pool_address: Address,
        log: BoundLogger,
    ) -> None:
        self.settings = settings
        self.state = state
        self.pool_address = pool_address
        self.log = log
        self._ledgers = dict(ledgers)
        self._events: list[PoolEvent] = []

    @property
    def events(self) -> list[PoolEvent]:
        """Events emitted so far in this call."""
        return list(self._events)

    def emit_event(self, event: PoolEvent) -> None:
        """Emit an event. It is discarded if the call fails."""
        self._events.append(event)

    def get_ledger(self, asset: AssetId) -> AssetLedger:
        """Return the ledger of `asset` bound to this call."""
        return self._ledgers[asset]

    def pull(self, asset: AssetId, owner: Address, amount: Amount) -> None:
        """Move `amount` of `asset` from `owner` into the pool, using the allowance granted to the pool."""
        ledger = self.get_ledger(asset)
        self._call_ledger(asset, 'pull', ledger.transfer_from, self.pool_address, owner, self.pool_address, amount)

    def push(self, asset: AssetId, recipient: Address, amount: Amount) -> None:
        """Move `amount` of `asset` from the pool to `recipient`."""
        ledger = self.get_ledger(asset)
        self._call_ledger(asset, 'push', ledger.transfer, self.pool_address, recipient, amount)

    def _call_ledger(self, asset: AssetId, what: str, fn: Any, *args: Any) -> None:
        try:
            fn(*args)
        except PoolFail:
            raise
        except Exception as e:
            # A ledger that fails in an unexpected way refuses the transfer.
            raise TransferFailed(f'{what} of asset {asset} failed: {e!r}') from e
