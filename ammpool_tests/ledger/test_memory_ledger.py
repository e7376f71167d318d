from ammpool.exception import TransferFailed
from ammpool.ledger import MemoryAssetLedger
from ammpool.storage import ChangesTracker
from ammpool_tests import unittest


class MemoryAssetLedgerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.ledger = MemoryAssetLedger(name='TKN')
        self.alice = self.gen_random_address()
        self.bob = self.gen_random_address()
        self.pool = self.gen_random_address()

    def test_mint(self) -> None:
        self.ledger.mint(self.alice, 100)
        self.ledger.mint(self.bob, 50)
        self.assertEqual(100, self.ledger.balance_of(self.alice))
        self.assertEqual(150, self.ledger.total_supply())
        self.assertEqual({self.alice: 100, self.bob: 50}, self.ledger.holders())

    def test_transfer(self) -> None:
        self.ledger.mint(self.alice, 100)
        self.ledger.transfer(self.alice, self.bob, 30)
        self.assertEqual(70, self.ledger.balance_of(self.alice))
        self.assertEqual(30, self.ledger.balance_of(self.bob))

        self.ledger.transfer(self.alice, self.bob, 70)
        self.assertEqual(0, self.ledger.balance_of(self.alice))
        self.assertNotIn(self.alice, self.ledger.holders())

    def test_transfer_insufficient_balance(self) -> None:
        self.ledger.mint(self.alice, 10)
        with self.assertRaises(TransferFailed):
            self.ledger.transfer(self.alice, self.bob, 11)
        self.assertEqual(10, self.ledger.balance_of(self.alice))

    def test_transfer_from(self) -> None:
        self.ledger.mint(self.alice, 100)
        self.ledger.approve(self.alice, self.pool, 60)

        self.ledger.transfer_from(self.pool, self.alice, self.pool, 40)
        self.assertEqual(60, self.ledger.balance_of(self.alice))
        self.assertEqual(40, self.ledger.balance_of(self.pool))
        self.assertEqual(20, self.ledger.allowance(self.alice, self.pool))

        with self.assertRaises(TransferFailed):
            self.ledger.transfer_from(self.pool, self.alice, self.pool, 21)

        self.ledger.transfer_from(self.pool, self.alice, self.pool, 20)
        self.assertEqual(0, self.ledger.allowance(self.alice, self.pool))

    def test_transfer_from_without_balance(self) -> None:
        self.ledger.approve(self.alice, self.pool, 60)
        with self.assertRaises(TransferFailed):
            self.ledger.transfer_from(self.pool, self.alice, self.pool, 1)
        self.assertEqual(60, self.ledger.allowance(self.alice, self.pool))

    def test_invalid_amounts(self) -> None:
        self.ledger.mint(self.alice, 100)
        with self.assertRaises(TransferFailed):
            self.ledger.transfer(self.alice, self.bob, -1)
        with self.assertRaises(TransferFailed):
            self.ledger.transfer(self.alice, self.bob, 1.5)
        with self.assertRaises(TransferFailed):
            self.ledger.mint(self.alice, -1)
        with self.assertRaises(TransferFailed):
            self.ledger.approve(self.alice, self.pool, True)

    def test_with_storage(self) -> None:
        self.ledger.mint(self.alice, 100)
        tracker = ChangesTracker(self.ledger.storage)
        tracked = self.ledger.with_storage(tracker)

        tracked.transfer(self.alice, self.bob, 40)
        self.assertEqual(40, tracked.balance_of(self.bob))
        self.assertEqual(0, self.ledger.balance_of(self.bob))
        self.assertEqual('TKN', tracked.name)

        tracker.commit()
        self.assertEqual(40, self.ledger.balance_of(self.bob))
        self.assertEqual(60, self.ledger.balance_of(self.alice))
