from ammpool.types import AssetId
from ammpool_tests import unittest


class PriceTestCase(unittest.PoolTestCase):
    def test_empty_pool_price(self) -> None:
        self.assertEqual(0, self.runner.call_view_method('get_price'))

    def test_initial_price(self) -> None:
        self.add_liquidity(100, 200)
        self.assertEqual(2 * 10**18, self.runner.call_view_method('get_price'))

    def test_price_after_swap_a_for_b(self) -> None:
        self.add_liquidity(100, 200)
        self.swap(AssetId.A, 10)

        price = self.runner.call_view_method('get_price')
        self.assertLess(price, 2 * 10**18)
        self.assertEqual(182 * 10**18 // 110, price)

    def test_price_after_swap_b_for_a(self) -> None:
        self.add_liquidity(100, 200)
        self.swap(AssetId.B, 20)
        self.assertGreater(self.runner.call_view_method('get_price'), 2 * 10**18)

    def test_price_scale_setting(self) -> None:
        self.runner = self.build_runner(self._settings.model_copy(update=dict(PRICE_SCALE=10**6)))
        self.add_liquidity(3, 1)
        self.assertEqual(333_333, self.runner.call_view_method('get_price'))

    def test_get_state(self) -> None:
        self.assertEqual(
            dict(reserve_a=0, reserve_b=0, total_shares=0, price=0, k=0),
            self.runner.call_view_method('get_state'),
        )
        self.add_liquidity(100, 200)
        self.assertEqual(
            dict(reserve_a=100, reserve_b=200, total_shares=141, price=2 * 10**18, k=20_000),
            self.runner.call_view_method('get_state'),
        )
