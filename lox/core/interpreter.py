"""Tree-walking evaluator for lox.

Expressions evaluate to lox values (see runtime.py). Statements evaluate to their outcome: None if they completed
normally, or a Returned carrying the value of a `return` that must unwind to the nearest call boundary. Runtime errors
are LoxRuntimeErrors and abort the whole run.
"""

import sys

from lox.core import syntax
from lox.core.lexical import TokenType
from lox.core.runtime import NATIVES, Environment, LoxCallable, LoxFunction, Returned, is_equal, is_truthy, stringify
from lox.lang.error import LoxRuntimeError


class Interpreter:
    """Executes resolved statements. Globals, and the distance tables of every run, persist across calls to
    interpret: a shell session feeds one Interpreter a line at a time.
    """

    def __init__(self, out=None):
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        for native in NATIVES:
            self.globals.define(native.name, native)

        self.environment = self.globals
        self.locals = {}
        self.last_value = None  # value of the last expression statement, echoed by the shell

        self._stmts = {
            syntax.Block: self.block,
            syntax.Expression: self.expression_stmt,
            syntax.Function: self.function_stmt,
            syntax.If: self.if_stmt,
            syntax.Print: self.print_stmt,
            syntax.Return: self.return_stmt,
            syntax.Var: self.var_stmt,
            syntax.While: self.while_stmt,
        }
        self._exprs = {
            syntax.Assign: self.assign,
            syntax.Binary: self.binary,
            syntax.Call: self.call,
            syntax.Grouping: self.grouping,
            syntax.Literal: self.literal,
            syntax.Logical: self.logical,
            syntax.Unary: self.unary,
            syntax.Variable: self.variable,
        }

    def interpret(self, statements, locals_):
        """Runs statements with the distance table the resolver produced for them. Returns the LoxRuntimeError that
        aborted the run, or None if every statement completed.
        """
        self.locals.update(locals_)
        try:
            for stmt in statements:
                if stmt is not None:
                    self.execute(stmt)
        except LoxRuntimeError as error:
            return error
        return None

    def execute(self, stmt):
        return self._stmts[type(stmt)](stmt)

    def evaluate(self, expr):
        return self._exprs[type(expr)](expr)

    def execute_block(self, statements, environment):
        """Executes statements in environment, then restores the previous environment no matter how they exit."""
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                outcome = self.execute(stmt)
                if outcome is not None:
                    return outcome
            return None
        finally:
            self.environment = previous

    # statements

    def block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def expression_stmt(self, stmt):
        self.last_value = self.evaluate(stmt.expression)

    def function_stmt(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def if_stmt(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def print_stmt(self, stmt):
        print(stringify(self.evaluate(stmt.expression)), file=self.out)

    def return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return Returned(value)

    def var_stmt(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def while_stmt(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            outcome = self.execute(stmt.body)
            if outcome is not None:
                return outcome
        return None

    # expressions

    def assign(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name.lexeme, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        check_number_operands(operator, left, right)

        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            if right == 0:
                raise LoxRuntimeError(operator, "Division by zero.")
            return left / right
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        # the parser builds no other Binary operator
        return left <= right

    def call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    def grouping(self, expr):
        return self.evaluate(expr.expression)

    def literal(self, expr):
        return expr.value

    def logical(self, expr):
        """Short-circuits, and yields the deciding operand itself rather than a bool."""
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        if not isinstance(right, float):
            raise LoxRuntimeError(expr.operator, "Operand must be a number.")
        return -right

    def variable(self, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, expr.name.lexeme)
        return self.globals.get(expr.name)


def check_number_operands(operator, left, right):
    if not (isinstance(left, float) and isinstance(right, float)):
        raise LoxRuntimeError(operator, "Operands must be numbers.")


def interpret(statements, locals_, out=None):
    """Runs statements in a fresh interpreter. Returns the LoxRuntimeError that aborted the run, or None."""
    return Interpreter(out).interpret(statements, locals_)
