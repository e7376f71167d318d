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

"""
Integer math of the constant-product pool.

All functions are pure. Amounts are Python ints, so there is no overflow, and every formula multiplies before it
divides to keep precision. Divisions round down, in favor of the pool, except `get_amount_in` which rounds up.
"""

import math

from ammpool.exception import InsufficientLiquidity, InvalidAmount
from ammpool.types import Amount


def require_amount(name: str, value: int, *, allow_zero: bool = False) -> None:
    """Fail with InvalidAmount unless `value` is a positive int (or zero, when allowed)."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidAmount(f'{name} must be an integer, got {type(value).__name__}')
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidAmount(f'{name} must be positive, got {value}')


def _require_reserves(reserve_in: int, reserve_out: int) -> None:
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity(f'empty reserves (reserve_in={reserve_in} reserve_out={reserve_out})')


def get_amount_out(amount_in: int, reserve_in: int, reserve_out: int, *, fee_bps: int, fee_denom: int) -> Amount:
    """Return the output of swapping exactly `amount_in`, after the fee.

        amount_in_after_fee = amount_in * (fee_denom - fee_bps)
        amount_out = reserve_out * amount_in_after_fee / (reserve_in * fee_denom + amount_in_after_fee)

    The result is always in the open interval (0, reserve_out).
    """
    require_amount('amount_in', amount_in)
    _require_reserves(reserve_in, reserve_out)

    amount_in_after_fee = amount_in * (fee_denom - fee_bps)
    numerator = reserve_out * amount_in_after_fee
    denominator = reserve_in * fee_denom + amount_in_after_fee
    amount_out = numerator // denominator

    if amount_out == 0:
        raise InvalidAmount(f'amount_in is too small to produce any output: {amount_in}')
    assert amount_out < reserve_out
    return Amount(amount_out)


def get_amount_in(amount_out: int, reserve_in: int, reserve_out: int, *, fee_bps: int, fee_denom: int) -> Amount:
    """Return the minimum input that makes `get_amount_out` give at least `amount_out`."""
    require_amount('amount_out', amount_out)
    _require_reserves(reserve_in, reserve_out)
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(f'cannot take {amount_out} out of a reserve of {reserve_out}')

    numerator = reserve_in * amount_out * fee_denom
    denominator = (reserve_out - amount_out) * (fee_denom - fee_bps)
    return Amount(-(-numerator // denominator))


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> Amount:
    """Return amount_b such that amount_b / amount_a == reserve_b / reserve_a."""
    require_amount('amount_a', amount_a)
    _require_reserves(reserve_a, reserve_b)
    return Amount(amount_a * reserve_b // reserve_a)


def initial_shares(amount_a: int, amount_b: int) -> Amount:
    """Shares minted by the first deposit: the integer square root of the product of the deposits."""
    return Amount(math.isqrt(amount_a * amount_b))


def proportional_shares(amount_a: int, amount_b: int, reserve_a: int, reserve_b: int, total_shares: int) -> Amount:
    """Shares minted by a deposit into a funded pool, measured on the more constraining side."""
    assert reserve_a > 0 and reserve_b > 0 and total_shares > 0
    return Amount(min(
        amount_a * total_shares // reserve_a,
        amount_b * total_shares // reserve_b,
    ))


def withdrawal_amounts(share_amount: int, reserve_a: int, reserve_b: int, total_shares: int) -> tuple[Amount, Amount]:
    """Assets owed for burning `share_amount` shares, rounded down."""
    assert 0 < share_amount <= total_shares
    return (
        Amount(reserve_a * share_amount // total_shares),
        Amount(reserve_b * share_amount // total_shares),
    )


def spot_price(reserve_a: int, reserve_b: int, scale: int) -> int:
    """Price of asset A in units of asset B, scaled by `scale`. It is 0 for an empty pool."""
    if reserve_a == 0:
        return 0
    return reserve_b * scale // reserve_a
