from ammpool.context import Context
from ammpool.types import AssetId, get_method_type, is_public_method, is_view_method, public, view
from ammpool_tests import unittest


class ContextTestCase(unittest.TestCase):
    def test_context(self) -> None:
        caller_id = self.gen_random_address()
        ctx = Context(caller_id=caller_id, timestamp=1_700_000_000)
        self.assertEqual(caller_id, ctx.caller_id)
        self.assertEqual(1_700_000_000, ctx.timestamp)
        self.assertEqual({'caller_id': caller_id.hex(), 'timestamp': 1_700_000_000}, ctx.to_json())

        copy = ctx.copy()
        self.assertIsNot(ctx, copy)
        self.assertEqual(ctx.to_json(), copy.to_json())

    def test_invalid_caller(self) -> None:
        with self.assertRaises(TypeError):
            Context(caller_id=b'')
        with self.assertRaises(TypeError):
            Context(caller_id='alice')

    def test_context_is_immutable(self) -> None:
        ctx = Context(caller_id=self.gen_random_address())
        with self.assertRaises(AttributeError):
            ctx.caller_id = b'mallory'


class TypesTestCase(unittest.TestCase):
    def test_asset_id(self) -> None:
        self.assertIs(AssetId.B, AssetId.A.other())
        self.assertIs(AssetId.A, AssetId.B.other())
        self.assertEqual('A', str(AssetId.A))

    def test_method_markers(self) -> None:
        @public
        def add(ctx):
            pass

        @view
        def get():
            pass

        def helper():
            pass

        self.assertTrue(is_public_method(add))
        self.assertFalse(is_view_method(add))
        self.assertTrue(is_view_method(get))
        self.assertFalse(is_public_method(get))
        self.assertIsNone(get_method_type(helper))
