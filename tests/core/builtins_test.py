import unittest

from monkey.core.builtins import Builtins
from monkey.core.objects import Array, BuiltIn, Error, Integer, String, TRUE


class BuiltinsTestCase(unittest.TestCase):

    def setUp(self):
        self.lines = []
        self.builtins = Builtins(out=self.lines.append)

    def call(self, name, *args):
        return self.builtins[name](list(args))

    def test_registry(self):
        self.assertEqual({"puts", "toStr", "len", "first", "last", "rest", "push"}, set(self.builtins))
        self.assertEqual(7, len(self.builtins))
        for name, builtin in self.builtins.items():
            self.assertIsInstance(builtin, BuiltIn)
            self.assertEqual(name, builtin.name)
        self.assertNotIn("print", self.builtins)

    def test_puts(self):
        self.assertIsNone(self.call("puts", String("a"), Integer(1), TRUE, None))
        self.assertIsNone(self.call("puts"))
        self.assertEqual(["a1truenil", ""], self.lines)

    def test_to_str(self):
        cases = [
            ([Integer(42)], String("42")),
            ([String("s")], String("s")),
            ([TRUE], String("true")),
            ([None], String("nil")),
            ([Array([Integer(1)])], String("[1]")),
        ]
        for args, expected in cases:
            self.assertEqual(expected, self.call("toStr", *args), args)

    def test_len(self):
        self.assertEqual(Integer(0), self.call("len", String("")))
        self.assertEqual(Integer(5), self.call("len", String("hello")))
        self.assertEqual(Integer(2), self.call("len", Array([None, None])))

    def test_array_functions(self):
        array = Array([Integer(1), Integer(2), Integer(3)])

        self.assertEqual(Integer(1), self.call("first", array))
        self.assertEqual(Integer(3), self.call("last", array))
        self.assertEqual([Integer(2), Integer(3)], self.call("rest", array).elements)
        self.assertEqual([Integer(1), Integer(2), Integer(3), String("x")], self.call("push", array, String("x")).elements)
        self.assertEqual(3, len(array.elements))

        empty = Array([])
        for name in ("first", "last", "rest"):
            self.assertIsNone(self.call(name, empty), name)
        self.assertEqual([Integer(1)], self.call("push", empty, Integer(1)).elements)

    def test_misuse(self):
        should_fail = {
            ("toStr",): "wrong number of arguments to toStr: got 0, want 1",
            ("len", String("a"), String("b")): "wrong number of arguments to len: got 2, want 1",
            ("len", Integer(1)): "argument to len not supported, got INTEGER",
            ("len", None): "argument to len not supported, got nil",
            ("first", String("abc")): "argument to first not supported, got STRING",
            ("last",): "wrong number of arguments to last: got 0, want 1",
            ("rest", TRUE): "argument to rest not supported, got BOOLEAN",
            ("push", Array([])): "wrong number of arguments to push: got 1, want 2",
            ("push", Integer(1), Integer(2)): "argument to push not supported, got INTEGER",
        }
        for (name, *args), message in should_fail.items():
            result = self.call(name, *args)
            self.assertIsInstance(result, Error, name)
            self.assertEqual(message, result.message)
            self.assertIsNone(result.token)


if __name__ == '__main__':
    unittest.main()
