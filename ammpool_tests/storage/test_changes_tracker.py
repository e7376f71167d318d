from ammpool.storage import ChangesTracker, MemoryStorage, StorageLockedError
from ammpool_tests import unittest


class ChangesTrackerTestCase(unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.storage = MemoryStorage({'a': 1, 'b': 2, 'x:1': 10, 'x:2': 20})
        self.changes_tracker = ChangesTracker(self.storage)

    def test_reads_fall_back_to_storage(self) -> None:
        self.assertEqual(1, self.changes_tracker.get('a'))
        self.assertEqual(7, self.changes_tracker.get('missing', default=7))
        self.assertIsNone(self.changes_tracker.get('missing', default=None))
        with self.assertRaises(KeyError):
            self.changes_tracker.get('missing')
        self.assertTrue(self.changes_tracker.has_key('a'))
        self.assertFalse(self.changes_tracker.has_key('missing'))

    def test_writes_are_buffered(self) -> None:
        self.changes_tracker.put('a', 100)
        self.changes_tracker.put('c', 3)

        self.assertEqual(100, self.changes_tracker.get('a'))
        self.assertEqual(3, self.changes_tracker.get('c'))
        self.assertEqual(1, self.storage.get('a'))
        self.assertFalse(self.storage.has_key('c'))
        self.assertFalse(self.changes_tracker.is_empty())

    def test_delete(self) -> None:
        self.changes_tracker.delete('a')

        with self.assertRaises(KeyError):
            self.changes_tracker.get('a')
        self.assertEqual(0, self.changes_tracker.get('a', default=0))
        self.assertFalse(self.changes_tracker.has_key('a'))
        self.assertEqual(1, self.storage.get('a'))

        # it can be written again
        self.changes_tracker.put('a', 5)
        self.assertEqual(5, self.changes_tracker.get('a'))

    def test_commit(self) -> None:
        self.changes_tracker.put('a', 100)
        self.changes_tracker.put('c', 3)
        self.changes_tracker.delete('b')
        self.changes_tracker.commit()

        self.assertTrue(self.changes_tracker.has_been_commited)
        self.assertEqual({'a': 100, 'c': 3, 'x:1': 10, 'x:2': 20}, self.storage.to_dict())

        with self.assertRaises(StorageLockedError):
            self.changes_tracker.put('a', 1)
        with self.assertRaises(StorageLockedError):
            self.changes_tracker.commit()

    def test_block(self) -> None:
        self.changes_tracker.put('a', 100)
        self.changes_tracker.block()

        self.assertTrue(self.changes_tracker.has_been_blocked)
        with self.assertRaises(StorageLockedError):
            self.changes_tracker.put('a', 1)
        with self.assertRaises(StorageLockedError):
            self.changes_tracker.delete('a')
        with self.assertRaises(StorageLockedError):
            self.changes_tracker.commit()
        self.assertEqual(1, self.storage.get('a'))

    def test_reset(self) -> None:
        self.changes_tracker.put('a', 100)
        self.changes_tracker.reset()
        self.assertTrue(self.changes_tracker.is_empty())
        self.assertEqual(1, self.changes_tracker.get('a'))

    def test_iter_items(self) -> None:
        self.changes_tracker.put('x:3', 30)
        self.changes_tracker.put('x:0', 0)
        self.changes_tracker.delete('x:1')
        self.changes_tracker.put('x:2', 21)

        self.assertEqual(
            [('x:0', 0), ('x:2', 21), ('x:3', 30)],
            list(self.changes_tracker.iter_items('x:')),
        )
        self.assertEqual([('x:1', 10), ('x:2', 20)], list(self.storage.iter_items('x:')))

    def test_commit_into_locked_storage(self) -> None:
        self.storage.lock()
        self.changes_tracker.put('a', 100)
        with self.assertRaises(StorageLockedError):
            self.changes_tracker.commit()

        self.storage.unlock()
        self.changes_tracker.commit()
        self.assertEqual(100, self.storage.get('a'))

    def test_nested_trackers(self) -> None:
        inner = ChangesTracker(self.changes_tracker)
        inner.put('a', 100)
        inner.delete('b')
        inner.commit()

        self.assertEqual(100, self.changes_tracker.get('a'))
        self.assertFalse(self.changes_tracker.has_key('b'))
        self.assertEqual(2, self.storage.get('b'))


class MemoryStorageTestCase(unittest.TestCase):
    def test_lock(self) -> None:
        storage = MemoryStorage()
        storage.put('a', 1)
        storage.lock()
        self.assertTrue(storage.is_locked())

        with self.assertRaises(StorageLockedError):
            storage.put('a', 2)
        with self.assertRaises(StorageLockedError):
            storage.delete('a')
        self.assertEqual(1, storage.get('a'))

        storage.unlock()
        storage.delete('a')
        storage.delete('a')
        self.assertEqual({}, storage.to_dict())

    def test_initial_data_is_copied(self) -> None:
        data = {'a': 1}
        storage = MemoryStorage(data)
        storage.put('a', 2)
        self.assertEqual({'a': 1}, data)
