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

from dataclasses import asdict, dataclass
from typing import Any, Callable, Iterable, Iterator, Sequence, TypeAlias

from structlog import get_logger

from ammpool.types import Address, Amount, AssetId

logger = get_logger()


@dataclass(slots=True, frozen=True, kw_only=True)
class BaseEvent:
    """The base dataclass for all pool events. Shouldn't be instantiated directly."""

    @property
    def name(self) -> str:
        """The event name."""
        return type(self).__name__

    def to_json(self) -> dict[str, Any]:
        """
        Convert this event to a json dict.

        >>> Swap(trader=Address(b'\x01'), asset_in=AssetId.A, amount_in=10, amount_out=18).to_json()
        {'type': 'Swap', 'trader': '01', 'asset_in': 'A', 'amount_in': 10, 'amount_out': 18}
        """
        json_dict: dict[str, Any] = dict(type=self.name)
        for key, value in asdict(self).items():
            if isinstance(value, bytes):
                value = value.hex()
            elif isinstance(value, AssetId):
                value = value.value
            json_dict[key] = value
        return json_dict


@dataclass(slots=True, frozen=True, kw_only=True)
class LiquidityAdded(BaseEvent):
    """Assets deposited into the pool and the shares minted for them."""
    provider: Address
    amount_a: Amount
    amount_b: Amount
    shares_minted: Amount


@dataclass(slots=True, frozen=True, kw_only=True)
class LiquidityRemoved(BaseEvent):
    """Shares burned and the assets returned for them."""
    provider: Address
    amount_a: Amount
    amount_b: Amount
    share_amount: Amount


@dataclass(slots=True, frozen=True, kw_only=True)
class Swap(BaseEvent):
    """An exchange of `amount_in` of `asset_in` for `amount_out` of the other asset."""
    trader: Address
    asset_in: AssetId
    amount_in: Amount
    amount_out: Amount


"""A sum type representing all pool events."""
PoolEvent: TypeAlias = LiquidityAdded | LiquidityRemoved | Swap

EventSubscriber: TypeAlias = Callable[[PoolEvent], None]


class EventLog:
    """Append-only log of the events emitted by committed calls.

    Events of a call are only appended after the call has been committed, so observers never see events of a
    failed call. Subscribers are called synchronously, in subscription order, for every appended event.
    """

    def __init__(self) -> None:
        self._events: list[PoolEvent] = []
        self._subscribers: list[EventSubscriber] = []
        self.log = logger.new()

    def subscribe(self, fn: EventSubscriber) -> None:
        """Call `fn` for every event appended from now on."""
        if fn not in self._subscribers:
            self._subscribers.append(fn)

    def unsubscribe(self, fn: EventSubscriber) -> None:
        if fn in self._subscribers:
            self._subscribers.remove(fn)

    def extend(self, events: Iterable[PoolEvent]) -> None:
        """Append the events of a committed call and publish them."""
        new_events = list(events)
        self._events.extend(new_events)
        for event in new_events:
            self.log.debug('event published', payload=event.to_json())
            for fn in self._subscribers:
                fn(event)

    @property
    def events(self) -> Sequence[PoolEvent]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PoolEvent]:
        return iter(tuple(self._events))

    def to_json(self) -> list[dict[str, Any]]:
        return [event.to_json() for event in self._events]
