"""Debug rendering of lox syntax trees in parenthesized prefix form, e.g. `1 + 2 * 3` prints as `(+ 1 (* 2 3))`."""

from lox.core import syntax
from lox.core.runtime import stringify


class AstPrinter:

    def __init__(self):
        self._nodes = {
            syntax.Assign: lambda expr: self.parenthesize("=", expr.name.lexeme, expr.value),
            syntax.Binary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Call: lambda expr: self.parenthesize("call", expr.callee, *expr.arguments),
            syntax.Grouping: lambda expr: self.parenthesize("group", expr.expression),
            syntax.Literal: self.literal,
            syntax.Logical: lambda expr: self.parenthesize(expr.operator.lexeme, expr.left, expr.right),
            syntax.Unary: lambda expr: self.parenthesize(expr.operator.lexeme, expr.right),
            syntax.Variable: lambda expr: expr.name.lexeme,

            syntax.Block: lambda stmt: self.parenthesize("block", *stmt.statements),
            syntax.Expression: lambda stmt: self.parenthesize(";", stmt.expression),
            syntax.Function: self.function,
            syntax.If: lambda stmt: self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch),
            syntax.Print: lambda stmt: self.parenthesize("print", stmt.expression),
            syntax.Return: lambda stmt: self.parenthesize("return", stmt.value),
            syntax.Var: lambda stmt: self.parenthesize("var", stmt.name.lexeme, stmt.initializer),
            syntax.While: lambda stmt: self.parenthesize("while", stmt.condition, stmt.body),
        }

    def print(self, node):
        """Returns node (an Expr or a Stmt) as a string."""
        return self._nodes[type(node)](node)

    def literal(self, expr):
        if isinstance(expr.value, str):
            return f"\"{expr.value}\""
        return stringify(expr.value)

    def function(self, stmt):
        params = "(" + " ".join(param.lexeme for param in stmt.params) + ")"
        return self.parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    def parenthesize(self, name, *parts):
        """Parts are nodes or plain strings. None parts (absent optional children) are left out."""
        result = f"({name}"
        for part in parts:
            if part is None:
                continue
            result += " " + (part if isinstance(part, str) else self.print(part))
        return result + ")"
