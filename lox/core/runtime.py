"""Runtime data model for lox.

A lox value is one of: None (nil), bool, float (number), str, or a LoxCallable. Numbers are always floats, so a value's
Python type is its lox type: bools are never mistaken for numbers.
"""

import math
import time
from abc import ABC, abstractmethod

from lox.lang.error import LoxRuntimeError


class Environment:
    """Variable bindings of one scope, plus a fixed link to the enclosing scope. Shared by reference between every
    closure that captured it, so assignment through one is visible through all.
    """

    def __init__(self, enclosing=None):
        self.values = {}
        self.enclosing = enclosing

    def define(self, name, value):
        """Binds name in this scope, replacing any previous binding (allowed for globals)."""
        self.values[name] = value

    def get(self, token):
        """Dynamic lookup in this scope only. Used for unresolved (global) references."""
        if token.lexeme in self.values:
            return self.values[token.lexeme]
        raise LoxRuntimeError(token, f"Undefined variable '{token.lexeme}'.")

    def assign(self, token, value):
        if token.lexeme not in self.values:
            raise LoxRuntimeError(token, f"Undefined variable '{token.lexeme}'.")
        self.values[token.lexeme] = value

    def ancestor(self, distance):
        environment = self
        for __ in range(distance):
            environment = environment.enclosing
        return environment

    def get_at(self, distance, name):
        """Reads a resolved local: the resolver guarantees that the binding exists distance hops up."""
        return self.ancestor(distance).values[name]

    def assign_at(self, distance, name, value):
        self.ancestor(distance).values[name] = value

    def __repr__(self):
        return f"Environment({list(self.values)}, enclosing={self.enclosing is not None})"


class Returned:
    """Outcome of executing a statement that hit `return`. Statements that complete normally produce None instead.
    Propagated up through every enclosing statement until the call boundary unwraps it.
    """
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Returned({stringify(self.value)})"


class LoxCallable(ABC):
    """Anything that can be called from lox code."""

    @abstractmethod
    def arity(self):
        """Exact number of arguments this callable accepts."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable. arguments has already been checked against arity."""


class NativeFunction(LoxCallable):
    """Callable implemented in Python."""

    def __init__(self, name, arity, function):
        self.name = name
        self._arity = arity
        self.function = function

    def arity(self):
        return self._arity

    def call(self, interpreter, arguments):
        return self.function(*arguments)

    def __str__(self):
        return "<native fn>"

    def __repr__(self):
        return f"NativeFunction('{self.name}')"


class LoxFunction(LoxCallable):
    """A function declaration paired with the environment it was declared in."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        # parented at the closure, not the caller: scoping is lexical
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        outcome = interpreter.execute_block(self.declaration.body, environment)
        if isinstance(outcome, Returned):
            return outcome.value
        return None

    def __str__(self):
        return f"<fn {self.declaration.name.lexeme}>"

    def __repr__(self):
        return f"LoxFunction('{self.declaration.name.lexeme}')"


def clock():
    """Seconds since the epoch."""
    return time.time()


NATIVES = [NativeFunction("clock", 0, clock)]


def is_truthy(value):
    """nil and false are falsy, everything else is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Equal only if same type and same value: no coercion, so `1 == true` and `"1" == 1` are false."""
    if left is None or right is None:
        return left is right
    return type(left) is type(right) and left == right


def stringify(value):
    """Display form of value, used by print."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)
