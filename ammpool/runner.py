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

import threading
from dataclasses import dataclass, field
from enum import StrEnum, auto, unique
from typing import Any, Callable

from structlog import get_logger

from ammpool.conf.get_settings import get_global_settings
from ammpool.conf.settings import PoolSettings
from ammpool.context import Context
from ammpool.events import EventLog, PoolEvent
from ammpool.exception import ForbiddenReentrancy, InvalidMethodCall, PoolFail, ViewMethodError
from ammpool.ledger import AssetLedger
from ammpool.pool import LiquidityPool, PoolEnvironment, PoolState
from ammpool.storage import ChangesTracker, MemoryStorage, PoolStorage
from ammpool.types import Address, AssetId, is_public_method, is_view_method

logger = get_logger()


@unique
class CallType(StrEnum):
    PUBLIC = auto()
    VIEW = auto()


@dataclass(slots=True, kw_only=True)
class CallInfo:
    """This object keeps information about a single call to the pool."""

    # The type of the method being called.
    type: CallType

    # The method being invoked.
    method_name: str

    # The caller. None for view calls.
    caller_id: Address | None

    # The args provided to the method.
    args: tuple[Any, ...]
    kwargs: dict[str, Any] = field(default_factory=dict)

    # Events emitted by the call. They are only published if the call succeeds.
    events: list[PoolEvent] = field(default_factory=list)

    # The error that failed the call, if any.
    error: BaseException | None = None

    # Set when the pool is called again while this call is in progress.
    reentrancy_attempted: bool = False

    @property
    def succeeded(self) -> bool:
        return self.error is None


class _CallTrackers:
    """Changes trackers opened for a single call, one over the pool storage and one per ledger storage."""
    __slots__ = ('pool', 'ledgers')

    def __init__(self, pool_storage: PoolStorage, ledgers: dict[AssetId, AssetLedger]) -> None:
        self.pool = ChangesTracker(pool_storage)
        self.ledgers: dict[AssetId, ChangesTracker] = {
            asset: ChangesTracker(ledger.storage) for asset, ledger in ledgers.items()
        }

    def all(self) -> list[ChangesTracker]:
        return [self.pool, *self.ledgers.values()]

    def is_empty(self) -> bool:
        return all(tracker.is_empty() for tracker in self.all())

    def block(self) -> None:
        for tracker in self.all():
            if not tracker.has_been_commited and not tracker.has_been_blocked:
                tracker.block()


class Runner:
    """Host of a liquidity pool.

    Every call is atomic: the pool method runs against changes trackers opened over the pool storage and over
    the storage of both asset ledgers. If the method returns, all trackers are committed and its events are
    published to the event log. If it fails, all trackers are blocked and its events are dropped, so neither the
    pool nor the ledgers nor the event log observe any effect of a failed call.

    Calls are serialized. A call coming from another thread waits for the current one to finish, while a call
    made from inside an ongoing call (for instance, by a ledger callback) fails with ForbiddenReentrancy and
    also fails the ongoing call.
    """

    def __init__(
        self,
        *,
        ledger_a: AssetLedger,
        ledger_b: AssetLedger,
        pool_address: Address,
        settings: PoolSettings | None = None,
        storage: PoolStorage | None = None,
        event_log: EventLog | None = None,
    ) -> None:
        if not isinstance(pool_address, bytes) or not pool_address:
            raise TypeError(f'pool_address must be non-empty bytes, got {pool_address!r}')
        self._settings = settings if settings is not None else get_global_settings()
        self.pool_address = pool_address
        self.storage = storage if storage is not None else MemoryStorage()
        self.ledgers: dict[AssetId, AssetLedger] = {
            AssetId.A: ledger_a,
            AssetId.B: ledger_b,
        }
        self.event_log = event_log if event_log is not None else EventLog()
        self.log = logger.new(pool=self._settings.POOL_NAME)

        # The pool storage can only be changed by committing a call.
        self.storage.lock()

        self._lock = threading.RLock()

        # Information about the last call.
        self._last_call_info: CallInfo | None = None

        # Information about the current call.
        self._call_info: CallInfo | None = None

    @property
    def settings(self) -> PoolSettings:
        return self._settings

    @property
    def state(self) -> PoolState:
        """Read-only view of the committed state of the pool."""
        return PoolState(self.storage)

    def get_ledger(self, asset: AssetId) -> AssetLedger:
        return self.ledgers[asset]

    def get_last_call_info(self) -> CallInfo:
        """Get last call information."""
        assert self._last_call_info is not None
        return self._last_call_info

    def is_call_in_progress(self) -> bool:
        return self._call_info is not None

    def call_public_method(self, method_name: str, ctx: Context, *args: Any, **kwargs: Any) -> Any:
        """Call a public method of the pool. Either all its effects are applied or none is."""
        if not isinstance(ctx, Context):
            raise TypeError(f'ctx must be a Context, got {type(ctx).__name__}')
        with self._lock:
            self._forbid_reentrancy(method_name)
            call_info = CallInfo(
                type=CallType.PUBLIC,
                method_name=method_name,
                caller_id=ctx.caller_id,
                args=args,
                kwargs=kwargs,
            )
            return self._run_call(call_info, lambda: self._execute_public_method_call(call_info, ctx))

    def call_view_method(self, method_name: str, *args: Any, **kwargs: Any) -> Any:
        """Call a view method of the pool. It cannot change anything."""
        with self._lock:
            self._forbid_reentrancy(method_name)
            call_info = CallInfo(
                type=CallType.VIEW,
                method_name=method_name,
                caller_id=None,
                args=args,
                kwargs=kwargs,
            )
            return self._run_call(call_info, lambda: self._execute_view_method_call(call_info))

    def _forbid_reentrancy(self, method_name: str) -> None:
        current = self._call_info
        if current is None:
            return
        current.reentrancy_attempted = True
        self.log.warn('reentrant call rejected', method=method_name, ongoing_method=current.method_name)
        raise ForbiddenReentrancy(
            f'cannot call `{method_name}` while `{current.method_name}` is in progress'
        )

    def _run_call(self, call_info: CallInfo, execute: Callable[[], Any]) -> Any:
        log = self.log.new(method=call_info.method_name, type=str(call_info.type))
        log.debug('call begin', caller=call_info.caller_id.hex() if call_info.caller_id else None,
                  args=call_info.args, kwargs=call_info.kwargs)
        self._call_info = call_info
        try:
            ret = execute()
        except PoolFail as e:
            call_info.error = e
            call_info.events.clear()
            log.info('call failed', error=type(e).__name__, message=str(e))
            raise
        except BaseException as e:
            call_info.error = e
            call_info.events.clear()
            log.error('call aborted by an unexpected error', exc_info=True)
            raise
        finally:
            self._last_call_info = call_info
            self._call_info = None

        log.debug('call success', ret=ret)
        if call_info.events:
            self.event_log.extend(call_info.events)
        return ret

    def _create_environment(self, trackers: _CallTrackers, log: Any) -> PoolEnvironment:
        ledgers = {
            asset: ledger.with_storage(trackers.ledgers[asset])
            for asset, ledger in self.ledgers.items()
        }
        return PoolEnvironment(
            settings=self._settings,
            state=PoolState(trackers.pool),
            ledgers=ledgers,
            pool_address=self.pool_address,
            log=log,
        )

    def _execute_public_method_call(self, call_info: CallInfo, ctx: Context) -> Any:
        trackers = _CallTrackers(self.storage, self.ledgers)
        try:
            env = self._create_environment(trackers, self.log.new(method=call_info.method_name))
            method = getattr(LiquidityPool(env), call_info.method_name, None)
            if method is None or not is_public_method(method):
                raise InvalidMethodCall(f'method `{call_info.method_name}` is not a public method')

            try:
                # The pool gets a copy of the context, so it cannot change the one held by the caller.
                ret = method(ctx.copy(), *call_info.args, **call_info.kwargs)
            except PoolFail:
                raise
            except Exception as e:
                # Convert any other exception to PoolFail.
                self.log.error('unexpected error in pool method', method=call_info.method_name, exc_info=True)
                raise PoolFail from e

            if call_info.reentrancy_attempted:
                raise ForbiddenReentrancy(f'a reentrant call was attempted during `{call_info.method_name}`')

            if self._settings.SLOW_ASSERTS:
                self._verify_invariants(env)

            call_info.events.extend(env.events)
            self._commit_all_changes_to_storage(trackers)
        except BaseException:
            trackers.block()
            raise
        return ret

    def _execute_view_method_call(self, call_info: CallInfo) -> Any:
        trackers = _CallTrackers(self.storage, self.ledgers)
        try:
            env = self._create_environment(trackers, self.log.new(method=call_info.method_name))
            method = getattr(LiquidityPool(env), call_info.method_name, None)
            if method is None or not is_view_method(method):
                raise InvalidMethodCall(f'method `{call_info.method_name}` is not a view method')

            ret = method(*call_info.args, **call_info.kwargs)

            if not trackers.is_empty() or env.events:
                raise ViewMethodError('view methods cannot change the state')
        finally:
            trackers.block()
        return ret

    def _verify_invariants(self, env: PoolEnvironment) -> None:
        """Check the pool invariants and that the ledgers hold what the pool accounts for."""
        env.state.verify_invariants()
        for asset in AssetId:
            balance = env.get_ledger(asset).balance_of(self.pool_address)
            reserve = env.state.get_reserve(asset)
            assert balance >= reserve, f'pool holds {balance} of asset {asset} but accounts for {reserve}'

    def _commit_all_changes_to_storage(self, trackers: _CallTrackers) -> None:
        """Commit all change trackers."""
        self.storage.unlock()
        try:
            for tracker in trackers.all():
                tracker.commit()
        finally:
            self.storage.lock()
