import unittest

from wear.core.environment import Environment
from wear.lang.error import WearRuntimeError


class EnvironmentTestCase(unittest.TestCase):

    def setUp(self):
        self.globals = Environment()
        self.globals.define("x", 1.0)
        self.globals.define("PI", 3.14, is_const=True)
        self.inner = self.globals.child().child()

    def test_get_walks_outward(self):
        self.assertEqual(self.inner.get("x"), 1.0)
        self.assertEqual(self.inner.get("PI"), 3.14)
        self.assertTrue(self.inner.has("x"))
        self.assertFalse(self.inner.has("y"))
        self.assertFalse(self.globals.has("y"))

    def test_shadowing(self):
        self.inner.define("x", "inner")

        self.assertEqual(self.inner.get("x"), "inner")
        self.assertEqual(self.globals.get("x"), 1.0)

    def test_duplicate_definition(self):
        with self.assertRaisesRegex(WearRuntimeError, "Variable 'x' is already defined in this scope."):
            self.globals.define("x", 2.0)
        self.assertEqual(self.globals.get("x"), 1.0)

    def test_assign_updates_defining_frame(self):
        self.inner.assign("x", 5.0)

        self.assertEqual(self.globals.get("x"), 5.0)
        self.assertNotIn("x", self.inner.values)

    def test_constants(self):
        # a constant can be read any number of times...
        for __ in range(3):
            self.assertEqual(self.inner.get("PI"), 3.14)

        # ...but never reassigned, from any frame
        should_fail = [self.globals, self.globals.child(), self.inner]
        for env in should_fail:
            with self.assertRaisesRegex(WearRuntimeError, "Cannot reassign constant 'PI'."):
                env.assign("PI", 3.0)
        with self.assertRaises(WearRuntimeError):
            self.globals.define("PI", 3.0, is_const=True)

        self.assertEqual(self.globals.get("PI"), 3.14)

    def test_shadowed_constant_is_independent(self):
        self.inner.define("PI", 3.0)
        self.inner.assign("PI", 4.0)

        self.assertEqual(self.inner.get("PI"), 4.0)
        self.assertEqual(self.globals.get("PI"), 3.14)

    def test_undefined(self):
        with self.assertRaisesRegex(WearRuntimeError, "Undefined variable 'y'."):
            self.inner.get("y")
        with self.assertRaisesRegex(WearRuntimeError, "Undefined variable 'y'."):
            self.inner.assign("y", 1.0)


if __name__ == '__main__':
    unittest.main()
