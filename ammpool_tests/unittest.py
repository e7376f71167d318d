import random
import re
import secrets
import unittest
from contextlib import contextmanager
from typing import Any, Iterator, Optional
from unittest import main as ut_main

from structlog import get_logger

from ammpool.conf.get_settings import get_global_settings
from ammpool.conf.settings import PoolSettings
from ammpool.context import Context
from ammpool.ledger import MemoryAssetLedger
from ammpool.runner import Runner
from ammpool.types import Address, Amount, AssetId

logger = get_logger()
main = ut_main


class TestCase(unittest.TestCase):
    seed_config: Optional[int] = None

    def setUp(self) -> None:
        self.log = logger.new()
        self.seed = secrets.randbits(64) if self.seed_config is None else self.seed_config
        self.log.info('set seed', seed=self.seed)
        self.rng = random.Random(self.seed)
        self._settings = get_global_settings()

    def gen_random_address(self) -> Address:
        """Generate a random 20-byte address."""
        return Address(self.rng.randbytes(20))

    @contextmanager
    def assertPoolFail(self, class_name: str, pattern: str | re.Pattern[str] | None = None) -> Iterator[Any]:
        """Assert that a PoolFail is raised and it has the expected class name and str(exc) format.
        """
        from ammpool.exception import PoolFail

        with self.assertRaises(PoolFail) as cm:
            yield cm

        self.assertEqual(cm.exception.__class__.__name__, class_name)

        if pattern is not None:
            actual = str(cm.exception)
            if isinstance(pattern, re.Pattern):
                assert pattern.match(actual)
            else:
                self.assertEqual(pattern, actual)


class PoolTestCase(TestCase):
    """Base class for tests that call a pool hosted by a runner with two in-memory ledgers."""

    def setUp(self) -> None:
        super().setUp()
        self.pool_address = Address(b'pool' + self.rng.randbytes(16))
        self.ledger_a = MemoryAssetLedger(name='A')
        self.ledger_b = MemoryAssetLedger(name='B')
        self.runner = self.build_runner()

    def build_runner(self, settings: PoolSettings | None = None) -> Runner:
        return Runner(
            settings=settings or self._settings,
            ledger_a=self.ledger_a,
            ledger_b=self.ledger_b,
            pool_address=self.pool_address,
        )

    def get_ledger(self, asset: AssetId) -> MemoryAssetLedger:
        return self.ledger_a if asset is AssetId.A else self.ledger_b

    def create_context(self, caller_id: Address | None = None) -> Context:
        """Create a Context instance with optional values or defaults."""
        return Context(caller_id=caller_id or self.gen_random_address())

    def fund(self, owner: Address, amount_a: int = 0, amount_b: int = 0) -> None:
        """Mint assets to `owner` and let the pool pull all of them."""
        for ledger, amount in [(self.ledger_a, amount_a), (self.ledger_b, amount_b)]:
            if amount:
                ledger.mint(owner, Amount(amount))
                ledger.approve(owner, self.pool_address, Amount(ledger.allowance(owner, self.pool_address) + amount))

    def add_liquidity(self, amount_a: int, amount_b: int, provider: Address | None = None) -> tuple[Address, int]:
        """Fund a provider and deposit both amounts. Return the provider and the shares minted."""
        provider = provider or self.gen_random_address()
        self.fund(provider, amount_a, amount_b)
        ctx = self.create_context(provider)
        shares = self.runner.call_public_method('add_liquidity', ctx, amount_a, amount_b)
        return provider, shares

    def remove_liquidity(self, provider: Address, share_amount: int, **kwargs: Any) -> tuple[int, int]:
        ctx = self.create_context(provider)
        return self.runner.call_public_method('remove_liquidity', ctx, share_amount, **kwargs)

    def swap(self, asset_in: AssetId, amount_in: int, trader: Address | None = None, **kwargs: Any) -> int:
        """Fund a trader with `amount_in` and swap it."""
        trader = trader or self.gen_random_address()
        if asset_in is AssetId.A:
            self.fund(trader, amount_a=amount_in)
            method_name = 'swap_a_for_b'
        else:
            self.fund(trader, amount_b=amount_in)
            method_name = 'swap_b_for_a'
        ctx = self.create_context(trader)
        return self.runner.call_public_method(method_name, ctx, amount_in, **kwargs)

    def get_reserves(self) -> tuple[int, int]:
        return self.runner.call_view_method('get_reserves')

    def get_k(self) -> int:
        return self.runner.call_view_method('get_k')

    def assertReservesBacked(self) -> None:
        """The pool holds at least the reserves it accounts for in both ledgers."""
        reserve_a, reserve_b = self.get_reserves()
        self.assertGreaterEqual(self.ledger_a.balance_of(self.pool_address), reserve_a)
        self.assertGreaterEqual(self.ledger_b.balance_of(self.pool_address), reserve_b)

    def assertSharesConserved(self) -> None:
        state = self.runner.state
        self.assertEqual(state.total_shares, sum(shares for _, shares in state.iter_shares()))
        self.assertEqual(state.total_shares, self.runner.call_view_method('total_liquidity'))
