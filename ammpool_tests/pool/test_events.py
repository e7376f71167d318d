from unittest.mock import Mock

from structlog.testing import capture_logs

from ammpool.events import LiquidityAdded, LiquidityRemoved, Swap
from ammpool.types import AssetId
from ammpool_tests import unittest


class EventsTestCase(unittest.PoolTestCase):
    def test_liquidity_added(self) -> None:
        provider, shares = self.add_liquidity(100, 200)

        self.assertEqual(
            [LiquidityAdded(provider=provider, amount_a=100, amount_b=200, shares_minted=141)],
            list(self.runner.event_log),
        )
        self.assertEqual(self.runner.event_log.events, tuple(self.runner.get_last_call_info().events))

    def test_liquidity_removed(self) -> None:
        provider, _ = self.add_liquidity(100, 200)
        self.remove_liquidity(provider, 70)

        self.assertEqual(2, len(self.runner.event_log))
        self.assertEqual(
            LiquidityRemoved(provider=provider, amount_a=49, amount_b=99, share_amount=70),
            self.runner.event_log.events[-1],
        )

    def test_swap(self) -> None:
        self.add_liquidity(100, 200)
        trader = self.gen_random_address()
        self.swap(AssetId.A, 10, trader=trader)
        self.swap(AssetId.B, 20, trader=trader)

        self.assertEqual(
            [
                Swap(trader=trader, asset_in=AssetId.A, amount_in=10, amount_out=18),
                Swap(trader=trader, asset_in=AssetId.B, amount_in=20, amount_out=10),
            ],
            list(self.runner.event_log)[1:],
        )

    def test_one_event_per_call(self) -> None:
        provider, shares = self.add_liquidity(1_000, 1_000)
        self.swap(AssetId.A, 10)
        self.swap(AssetId.B, 10)
        self.remove_liquidity(provider, shares)
        names = [event.name for event in self.runner.event_log]
        self.assertEqual(['LiquidityAdded', 'Swap', 'Swap', 'LiquidityRemoved'], names)

    def test_failed_calls_emit_nothing(self) -> None:
        provider, _ = self.add_liquidity(100, 200)

        with self.assertPoolFail('InsufficientShares'):
            self.remove_liquidity(provider, 1_000)
        with self.assertPoolFail('SlippageExceeded'):
            self.swap(AssetId.A, 10, amount_out_min=1_000)

        self.assertEqual(1, len(self.runner.event_log))
        self.assertEqual([], self.runner.get_last_call_info().events)

    def test_view_calls_emit_nothing(self) -> None:
        self.add_liquidity(100, 200)
        self.runner.call_view_method('get_state')
        self.assertEqual(1, len(self.runner.event_log))

    def test_subscribe(self) -> None:
        subscriber = Mock()
        self.runner.event_log.subscribe(subscriber)

        provider, _ = self.add_liquidity(100, 200)
        with self.assertPoolFail('InsufficientShares'):
            self.remove_liquidity(provider, 1_000)

        subscriber.assert_called_once_with(
            LiquidityAdded(provider=provider, amount_a=100, amount_b=200, shares_minted=141)
        )

        self.runner.event_log.unsubscribe(subscriber)
        self.swap(AssetId.A, 10)
        self.assertEqual(1, subscriber.call_count)

    def test_to_json(self) -> None:
        trader = self.gen_random_address()
        self.add_liquidity(100, 200)
        self.swap(AssetId.A, 10, trader=trader)

        self.assertEqual(
            dict(type='Swap', trader=trader.hex(), asset_in='A', amount_in=10, amount_out=18),
            self.runner.event_log.to_json()[-1],
        )

    def test_committed_calls_return_their_result(self) -> None:
        provider = self.gen_random_address()
        self.fund(provider, 100, 200)
        ctx = self.create_context(provider)

        self.assertEqual(141, self.runner.call_public_method('add_liquidity', ctx, 100, 200))
        self.assertTrue(self.runner.get_last_call_info().succeeded)

        trader = self.gen_random_address()
        self.fund(trader, amount_a=10)
        self.assertEqual(18, self.runner.call_public_method('swap_a_for_b', self.create_context(trader), 10))
        self.assertEqual(2, len(self.runner.event_log))

    def test_published_events_are_logged(self) -> None:
        with capture_logs() as logs:
            provider, shares = self.add_liquidity(100, 200)
        self.assertEqual(141, shares)

        published = [log for log in logs if log['event'] == 'event published']
        self.assertEqual(1, len(published))
        self.assertEqual(self.runner.event_log.to_json(), [published[0]['payload']])
