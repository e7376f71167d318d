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

from ammpool.context import Context
from ammpool.events import LiquidityAdded, LiquidityRemoved, Swap
from ammpool.exception import (
    InsufficientLiquidity,
    InsufficientShares,
    InvalidAmount,
    InvalidShareAmount,
    SlippageExceeded,
)
from ammpool.pool import curve
from ammpool.pool.environment import PoolEnvironment
from ammpool.pool.state import PoolState
from ammpool.types import Address, Amount, AssetId, public, view


class LiquidityPool:
    """Liquidity pool inspired by Uniswap v2.

    The pool starts empty. The first deposit sets the initial price and mints `isqrt(amount_a * amount_b)`
    shares. Later deposits mint shares proportionally to the more constraining side of the deposit; an
    unbalanced deposit leaves its unmatched excess in the reserves.

    The swap methods are:
    - swap_a_for_b()
    - swap_b_for_a()

    At all times, we must have the following invariants:
    - `total_shares == sum(shares)`
    - `reserve_a == 0` iff `reserve_b == 0` iff `total_shares == 0`
    - `reserve_a * reserve_b` never decreases on swaps

    Every public method validates its arguments, then updates the reserves and shares, and only then moves
    assets through the ledgers. Methods are executed by a Runner, which makes each call atomic.

    Features that are available in Uniswap v2 but are not implemented here:
    - Oracle
    - Flash swaps
    - Protocol fee
    """
    __slots__ = ('__env',)

    def __init__(self, env: PoolEnvironment) -> None:
        self.__env = env

    @final
    @property
    def env(self) -> PoolEnvironment:
        """Return the environment of the current call."""
        return self.__env

    @property
    def state(self) -> PoolState:
        return self.__env.state

    @public
    def add_liquidity(self, ctx: Context, amount_a: Amount, amount_b: Amount) -> Amount:
        """Deposit both assets and mint shares to the caller. Return the number of shares minted."""
        curve.require_amount('amount_a', amount_a)
        curve.require_amount('amount_b', amount_b)

        state = self.state
        provider = ctx.caller_id

        if state.is_empty():
            shares_minted = curve.initial_shares(amount_a, amount_b)
        else:
            shares_minted = curve.proportional_shares(
                amount_a, amount_b, state.reserve_a, state.reserve_b, state.total_shares
            )
            if shares_minted == 0:
                raise InvalidAmount('deposit is too small to mint any share')

        state.reserve_a += amount_a
        state.reserve_b += amount_b
        state.set_shares(provider, state.get_shares(provider) + shares_minted)
        state.total_shares += shares_minted

        self.env.pull(AssetId.A, provider, amount_a)
        self.env.pull(AssetId.B, provider, amount_b)

        self.env.emit_event(LiquidityAdded(
            provider=provider,
            amount_a=amount_a,
            amount_b=amount_b,
            shares_minted=shares_minted,
        ))
        return shares_minted

    @public
    def remove_liquidity(
        self,
        ctx: Context,
        share_amount: Amount,
        amount_a_min: Amount = Amount(0),
        amount_b_min: Amount = Amount(0),
    ) -> tuple[Amount, Amount]:
        """Burn shares of the caller and return its part of both reserves."""
        try:
            curve.require_amount('share_amount', share_amount)
        except InvalidAmount as e:
            raise InvalidShareAmount(str(e)) from e
        curve.require_amount('amount_a_min', amount_a_min, allow_zero=True)
        curve.require_amount('amount_b_min', amount_b_min, allow_zero=True)

        state = self.state
        provider = ctx.caller_id

        held = state.get_shares(provider)
        if held < share_amount:
            raise InsufficientShares(f'cannot burn {share_amount} shares, caller holds {held}')

        total_shares = state.total_shares
        amount_a, amount_b = curve.withdrawal_amounts(share_amount, state.reserve_a, state.reserve_b, total_shares)
        if amount_a < amount_a_min:
            raise SlippageExceeded(f'insufficient a amount: {amount_a} < {amount_a_min}')
        if amount_b < amount_b_min:
            raise SlippageExceeded(f'insufficient b amount: {amount_b} < {amount_b_min}')

        state.set_shares(provider, held - share_amount)
        state.total_shares = total_shares - share_amount
        state.reserve_a -= amount_a
        state.reserve_b -= amount_b

        self.env.push(AssetId.A, provider, amount_a)
        self.env.push(AssetId.B, provider, amount_b)

        self.env.emit_event(LiquidityRemoved(
            provider=provider,
            amount_a=amount_a,
            amount_b=amount_b,
            share_amount=share_amount,
        ))
        return amount_a, amount_b

    @public
    def swap_a_for_b(self, ctx: Context, amount_in: Amount, amount_out_min: Amount = Amount(0)) -> Amount:
        """Swap exactly `amount_in` of asset A for as much asset B as possible."""
        return self._swap(ctx, AssetId.A, amount_in, amount_out_min)

    @public
    def swap_b_for_a(self, ctx: Context, amount_in: Amount, amount_out_min: Amount = Amount(0)) -> Amount:
        """Swap exactly `amount_in` of asset B for as much asset A as possible."""
        return self._swap(ctx, AssetId.B, amount_in, amount_out_min)

    def _swap(self, ctx: Context, asset_in: AssetId, amount_in: Amount, amount_out_min: Amount) -> Amount:
        curve.require_amount('amount_in', amount_in)
        curve.require_amount('amount_out_min', amount_out_min, allow_zero=True)

        state = self.state
        if state.is_empty():
            raise InsufficientLiquidity('the pool is empty')

        asset_out = asset_in.other()
        reserve_in = state.get_reserve(asset_in)
        reserve_out = state.get_reserve(asset_out)
        amount_out = self._get_amount_out(amount_in, reserve_in, reserve_out)
        if amount_out < amount_out_min:
            raise SlippageExceeded(f'amount out is too low: {amount_out} < {amount_out_min}')

        state.set_reserve(asset_in, reserve_in + amount_in)
        state.set_reserve(asset_out, reserve_out - amount_out)
        assert (reserve_in + amount_in) * (reserve_out - amount_out) >= reserve_in * reserve_out

        self.env.pull(asset_in, ctx.caller_id, amount_in)
        self.env.push(asset_out, ctx.caller_id, amount_out)

        self.env.emit_event(Swap(
            trader=ctx.caller_id,
            asset_in=asset_in,
            amount_in=amount_in,
            amount_out=amount_out,
        ))
        return amount_out

    def _get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> Amount:
        settings = self.env.settings
        return curve.get_amount_out(
            amount_in, reserve_in, reserve_out, fee_bps=settings.FEE_BPS, fee_denom=settings.FEE_DENOM
        )

    @view
    def get_amount_out(self, amount_in: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
        """Return the maximum amount_out for an exact amount_in."""
        return self._get_amount_out(amount_in, reserve_in, reserve_out)

    @view
    def get_amount_in(self, amount_out: Amount, reserve_in: Amount, reserve_out: Amount) -> Amount:
        """Return the minimum amount_in for an exact amount_out."""
        settings = self.env.settings
        return curve.get_amount_in(
            amount_out, reserve_in, reserve_out, fee_bps=settings.FEE_BPS, fee_denom=settings.FEE_DENOM
        )

    @view
    def quote(self, amount_a: Amount, reserve_a: Amount, reserve_b: Amount) -> Amount:
        """Return amount_b such that amount_b/amount_a = reserve_b/reserve_a"""
        return curve.quote(amount_a, reserve_a, reserve_b)

    @view
    def get_reserves(self) -> tuple[Amount, Amount]:
        """Return the current reserves."""
        return (self.state.reserve_a, self.state.reserve_b)

    @view
    def get_k(self) -> int:
        """Return the constant product of the reserves."""
        return self.state.reserve_a * self.state.reserve_b

    @view
    def get_price(self) -> int:
        """Return the price of asset A in units of asset B, scaled by PRICE_SCALE. An empty pool has price 0."""
        return curve.spot_price(self.state.reserve_a, self.state.reserve_b, self.env.settings.PRICE_SCALE)

    @view
    def liquidity(self, provider: Address) -> Amount:
        """Return the shares held by `provider`."""
        return self.state.get_shares(provider)

    @view
    def total_liquidity(self) -> Amount:
        """Return the total number of shares."""
        return self.state.total_shares

    @view
    def get_state(self) -> dict[str, Any]:
        reserve_a, reserve_b = self.get_reserves()
        return {
            'reserve_a': reserve_a,
            'reserve_b': reserve_b,
            'total_shares': self.total_liquidity(),
            'price': self.get_price(),
            'k': self.get_k(),
        }
