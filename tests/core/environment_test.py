import unittest

from monkey.core.environment import Environment
from monkey.core.objects import Integer


class EnvironmentTestCase(unittest.TestCase):

    def test_lookup(self):
        env = Environment()
        self.assertIs(env.set("x", Integer(1)), env["x"])
        self.assertRaises(KeyError, env.__getitem__, "y")

    def test_enclosed(self):
        outer = Environment()
        outer.set("x", Integer(1))
        outer.set("y", Integer(2))

        inner = Environment.enclosed(outer)
        inner.set("x", Integer(10))

        self.assertEqual(Integer(10), inner["x"])
        self.assertEqual(Integer(2), inner["y"])
        self.assertEqual(Integer(1), outer["x"])
        self.assertRaises(KeyError, Environment.enclosed(Environment()).__getitem__, "x")

    def test_frames_are_shared(self):
        outer = Environment()
        inner = Environment.enclosed(outer)

        outer.set("late", Integer(3))
        self.assertEqual(Integer(3), inner["late"])

        inner.set("local", Integer(4))
        self.assertRaises(KeyError, outer.__getitem__, "local")

    def test_deep_chain(self):
        env = Environment()
        env.set("root", Integer(0))
        for __ in range(50):
            env = Environment.enclosed(env)
        self.assertEqual(Integer(0), env["root"])


if __name__ == '__main__':
    unittest.main()
