import io
import math
import unittest

from lox.core.interpreter import Interpreter
from lox.core.lexical import Token, TokenType
from lox.core.runtime import (NATIVES, Environment, LoxCallable, NativeFunction, Returned, is_equal, is_truthy,
                              stringify)
from lox.lang.error import LoxRuntimeError


def identifier(name, line=1):
    return Token(TokenType.IDENTIFIER, name, None, line)


class EnvironmentTestCase(unittest.TestCase):

    def test_define_and_get(self):
        env = Environment()
        env.define("a", 1.0)
        self.assertEqual(1.0, env.get(identifier("a")))

        env.define("a", "redefined")
        self.assertEqual("redefined", env.get(identifier("a")))

        env.define("b", None)
        self.assertIsNone(env.get(identifier("b")))

    def test_undefined(self):
        env = Environment()
        for operation in (lambda: env.get(identifier("x", 3)), lambda: env.assign(identifier("x", 3), 1.0)):
            with self.assertRaises(LoxRuntimeError) as context:
                operation()
            self.assertEqual("[line 3] Runtime Error at 'x': Undefined variable 'x'.", str(context.exception))

    def test_get_is_not_dynamic(self):
        outer = Environment()
        outer.define("a", 1.0)
        with self.assertRaises(LoxRuntimeError):
            Environment(outer).get(identifier("a"))

    def test_distances(self):
        globals_ = Environment()
        outer = Environment(globals_)
        inner = Environment(outer)
        outer.define("a", "outer")
        inner.define("a", "inner")

        self.assertIs(inner, inner.ancestor(0))
        self.assertIs(globals_, inner.ancestor(2))
        self.assertEqual(("inner", "outer"), (inner.get_at(0, "a"), inner.get_at(1, "a")))

        inner.assign_at(1, "a", "assigned")
        self.assertEqual("assigned", outer.values["a"])
        self.assertEqual("inner", inner.values["a"])

    def test_shared_by_reference(self):
        shared = Environment()
        shared.define("n", 0.0)
        first, second = Environment(shared), Environment(shared)

        first.assign_at(1, "n", 5.0)
        self.assertEqual(5.0, second.get_at(1, "n"))


class ValueTestCase(unittest.TestCase):

    def test_truthiness(self):
        for value in (None, False):
            self.assertFalse(is_truthy(value), value)
        for value in (True, 0.0, 1.0, "", "false", NATIVES[0]):
            self.assertTrue(is_truthy(value), value)

    def test_equality(self):
        should_pass = [(None, None), (1.0, 1.0), ("a", "a"), (True, True), (NATIVES[0], NATIVES[0])]
        should_fail = [(None, False), (0.0, False), (1.0, True), ("1", 1.0), (1.0, 2.0), ("a", "b"), (None, 0.0),
                       (math.nan, math.nan)]

        for left, right in should_pass:
            self.assertTrue(is_equal(left, right), (left, right))
        for left, right in should_fail:
            self.assertFalse(is_equal(left, right), (left, right))
            self.assertFalse(is_equal(right, left), (right, left))

    def test_stringify(self):
        cases = {
            None: "nil",
            True: "true",
            False: "false",
            3.0: "3",
            -0.5: "-0.5",
            2.5: "2.5",
            1e21: "1e+21",
            123456789.0: "123456789",
            math.inf: "Infinity",
            -math.inf: "-Infinity",
            "text": "text",
            "": "",
        }
        for value, expected in cases.items():
            self.assertEqual(expected, stringify(value), value)

        self.assertEqual("NaN", stringify(math.nan))
        self.assertEqual("<native fn>", stringify(NATIVES[0]))


class CallableTestCase(unittest.TestCase):

    def test_natives(self):
        clock, = NATIVES
        self.assertIsInstance(clock, LoxCallable)
        self.assertEqual(("clock", 0), (clock.name, clock.arity()))
        self.assertIsInstance(clock.call(Interpreter(io.StringIO()), []), float)

    def test_native_function(self):
        add = NativeFunction("add", 2, lambda left, right: left + right)
        self.assertEqual(2, add.arity())
        self.assertEqual(3.0, add.call(None, [1.0, 2.0]))
        self.assertEqual("<native fn>", str(add))

    def test_abstract(self):
        with self.assertRaises(TypeError):
            LoxCallable()

    def test_returned(self):
        self.assertIsNone(Returned(None).value)
        self.assertEqual(1.0, Returned(1.0).value)
        with self.assertRaises(AttributeError):
            Returned(1.0).other = 2.0


if __name__ == '__main__':
    unittest.main()
