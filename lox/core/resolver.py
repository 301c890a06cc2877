"""Static scope resolution for lox.

One pass over the statement list with a stack of block scopes. Every local variable reference and assignment target
is annotated with its scope distance: the number of scope boundaries between the reference and the scope that declares
the name (0 is the innermost scope). A reference that no active scope declares is left out of the table and looked up
in the global environment at run time.

The interpreter creates exactly one environment wherever this pass opens a scope (blocks, function calls), so a
distance computed here is the number of `enclosing` hops the interpreter walks.

A local variable's initializer that mentions the variable itself reads the binding it shadows: an enclosing local, or a
global declared earlier. With nothing to shadow, the reference is an error.

Rejected, without stopping the pass:
    - reading a local variable in its own initializer, when it shadows nothing
    - declaring the same name twice in one local scope
    - `return` outside of a function body
"""

import enum

from lox.core import syntax
from lox.lang.error import ResolutionError


class FunctionType(enum.Enum):
    NONE = enum.auto()
    FUNCTION = enum.auto()


class Resolver:
    """Single-use resolver. self.locals maps expression nodes to distances, self.errors collects ResolutionErrors."""
    DECLARED = False
    DEFINED = True

    def __init__(self, globals_=()):
        self.scopes = []  # each scope is a dict of name: DECLARED/DEFINED
        self.globals = set(globals_)  # global names declared so far
        self.current_function = FunctionType.NONE

        self.locals = {}
        self.errors = []

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
            syntax.Logical: self.binary,
            syntax.Unary: self.unary,
            syntax.Variable: self.variable,
        }

    def resolve(self, statements):
        """Resolves statements. Statements that failed to parse (None) are skipped."""
        for stmt in statements:
            if stmt is not None:
                self._stmts[type(stmt)](stmt)

    def resolve_expr(self, expr):
        self._exprs[type(expr)](expr)

    # statements

    def block(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    def expression_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def function_stmt(self, stmt):
        # defined before the body is resolved, so the function can refer to itself
        self.declare(stmt.name)
        self.define(stmt.name)
        if not self.scopes:
            self.globals.add(stmt.name.lexeme)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    def if_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve([stmt.then_branch, stmt.else_branch])

    def print_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def return_stmt(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.errors.append(ResolutionError(stmt.keyword, "Can't return from top-level code."))

        if stmt.value is not None:
            self.resolve_expr(stmt.value)

    def var_stmt(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.define(stmt.name)
        if not self.scopes:
            self.globals.add(stmt.name.lexeme)

    def while_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve([stmt.body])

    # expressions

    def assign(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def binary(self, expr):
        """Binary and Logical expressions."""
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def call(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def grouping(self, expr):
        self.resolve_expr(expr.expression)

    def literal(self, expr):
        """Nothing to resolve."""

    def unary(self, expr):
        self.resolve_expr(expr.right)

    def variable(self, expr):
        name = expr.name.lexeme
        if self.scopes and self.scopes[-1].get(name) is Resolver.DECLARED:
            # inside its own initializer: refer past the innermost scope
            if not self.resolve_local(expr, expr.name, skip=1) and name not in self.globals:
                self.errors.append(ResolutionError(expr.name, "Can't read local variable in its own initializer."))
            return

        self.resolve_local(expr, expr.name)

    # helpers

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        """Adds name to the innermost scope as declared but not yet usable. Globals are not tracked."""
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.errors.append(ResolutionError(name, "Already a variable with this name in this scope."))
        scope[name.lexeme] = Resolver.DECLARED

    def define(self, name):
        if self.scopes:
            self.scopes[-1][name.lexeme] = Resolver.DEFINED

    def resolve_local(self, expr, name, skip=0):
        """Records expr's distance to the innermost scope declaring name, ignoring the skip innermost scopes. Leaves
        expr unresolved if there is none. Returns whether expr was resolved.
        """
        scopes = self.scopes[:len(self.scopes) - skip]
        for distance, scope in enumerate(reversed(scopes), start=skip):
            if name.lexeme in scope:
                self.locals[expr] = distance
                return True
        return False

    def resolve_function(self, stmt, function_type):
        enclosing_function = self.current_function
        self.current_function = function_type

        self.begin_scope()
        for param in stmt.params:
            self.declare(param)
            self.define(param)
        self.resolve(stmt.body)
        self.end_scope()

        self.current_function = enclosing_function


def resolve(statements, globals_=()):
    """Returns (locals, errors) for statements: locals maps each resolved expression node to its scope distance.
    globals_ names the globals already defined by earlier runs.
    """
    resolver = Resolver(globals_)
    resolver.resolve(statements)
    return resolver.locals, resolver.errors
