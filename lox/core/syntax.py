"""Abstract syntax tree for lox. Expressions and statements are two closed families of immutable nodes.

Nodes compare and hash by identity (eq=False), never by value: the resolver keys its distance table on node identity,
so two identical `Variable` nodes at different source positions resolve independently.

```
Expr ::= Assign(name, value) | Binary(left, operator, right) | Call(callee, paren, arguments) | Grouping(expression)
       | Literal(value) | Logical(left, operator, right) | Unary(operator, right) | Variable(name)

Stmt ::= Block(statements) | Expression(expression) | Function(name, params, body) | If(condition, then, else?)
       | Print(expression) | Return(keyword, value?) | Var(name, initializer?) | While(condition, body)
```
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from lox.core.lexical import Token


@dataclass(frozen=True, eq=False)
class Expr:
    """Superclass of every expression node."""


@dataclass(frozen=True, eq=False)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True, eq=False)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate runtime errors
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True, eq=False)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Literal(Expr):
    value: Any  # None, bool, float or str


@dataclass(frozen=True, eq=False)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True, eq=False)
class Variable(Expr):
    name: Token


@dataclass(frozen=True, eq=False)
class Stmt:
    """Superclass of every statement node."""


@dataclass(frozen=True, eq=False)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True, eq=False)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True, eq=False)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True, eq=False)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True, eq=False)
class While(Stmt):
    condition: Expr
    body: Stmt


EXPRS = (Assign, Binary, Call, Grouping, Literal, Logical, Unary, Variable)
STMTS = (Block, Expression, Function, If, Print, Return, Var, While)
