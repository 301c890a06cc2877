"""Recursive descent parser for lox. Each grammar rule below is one method, lowest precedence first:

```
program     ::= declaration* EOF
declaration ::= funDecl | varDecl | statement
funDecl     ::= "fun" IDENT "(" params? ")" block
varDecl     ::= "var" IDENT ( "=" expression )? ";"
statement   ::= exprStmt | ifStmt | printStmt | returnStmt | whileStmt | forStmt | block
forStmt     ::= "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement
expression  ::= assignment
assignment  ::= IDENT "=" assignment | logic_or
logic_or    ::= logic_and ( "or" logic_and )*
logic_and   ::= equality ( "and" equality )*
equality    ::= comparison ( ( "!=" | "==" ) comparison )*
comparison  ::= term ( ( ">" | ">=" | "<" | "<=" ) term )*
term        ::= factor ( ( "-" | "+" ) factor )*
factor      ::= unary ( ( "/" | "*" ) unary )*
unary       ::= ( "!" | "-" ) unary | call
call        ::= primary ( "(" arguments? ")" )*
primary     ::= NUMBER | STRING | "true" | "false" | "nil" | "(" expression ")" | IDENT
```

`for` has no node of its own: it is desugared into a `while` wrapped in blocks.

On a syntax error the parser records it, discards tokens up to the next statement boundary and keeps going, so that
one pass reports every independent error. The statement that failed is represented by None in the output.
"""

from lox.core import syntax
from lox.core.lexical import TokenType
from lox.lang.error import LoxRuntimeError, ParseError


class Parser:
    """Single-use parser over one token list."""
    MAX_ARGS = 255

    # tokens that start a statement: synchronize stops in front of them
    BOUNDARIES = {
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
        TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
    }

    def __init__(self, tokens):
        self.tokens = tokens
        self.current = 0
        self.errors = []

    def parse(self):
        """Returns the list of parsed statements, with None for each statement that failed to parse. Nesting too deep
        for the host stack stops the parse with a Stack overflow error at the token where it was reached.
        """
        statements = []
        while not self.at_end():
            try:
                statements.append(self.declaration())
            except RecursionError:
                self.errors.append(LoxRuntimeError(self.peek(), "Stack overflow."))
                break
        return statements

    # declarations and statements

    def declaration(self):
        try:
            if self.match(TokenType.FUN):
                return self.function()
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError as error:
            self.errors.append(error)
            self.synchronize()
            return None

    def function(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect function name.")
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self.report(self.peek(), f"Can't have more than {Parser.MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before function body.")
        return syntax.Function(name, tuple(params), self.block())

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return syntax.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return syntax.Block(self.block())
        return self.expression_statement()

    def for_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = syntax.Block((body, syntax.Expression(increment)))
        if condition is None:
            condition = syntax.Literal(True)
        body = syntax.While(condition, body)
        if initializer is not None:
            body = syntax.Block((initializer, body))

        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = self.statement() if self.match(TokenType.ELSE) else None
        return syntax.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return syntax.Print(value)

    def return_statement(self):
        keyword = self.previous()

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return syntax.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return syntax.While(condition, self.statement())

    def block(self):
        """Parses declarations up to the closing brace. Assumes the opening brace was consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            statements.append(self.declaration())

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return tuple(statements)

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return syntax.Expression(expr)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, syntax.Variable):
                return syntax.Assign(expr.name, value)

            self.report(equals, "Invalid assignment target.")  # no need to synchronize

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenType.OR):
            expr = syntax.Logical(expr, self.previous(), self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            expr = syntax.Logical(expr, self.previous(), self.equality())
        return expr

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self.binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def binary(self, operand, *operators):
        """Left-associative chain of operand (the next-higher precedence rule) separated by any of operators."""
        expr = operand()
        while self.match(*operators):
            expr = syntax.Binary(expr, self.previous(), operand())
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            return syntax.Unary(self.previous(), self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self.report(self.peek(), f"Can't have more than {Parser.MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return syntax.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return syntax.Literal(False)
        if self.match(TokenType.TRUE):
            return syntax.Literal(True)
        if self.match(TokenType.NIL):
            return syntax.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return syntax.Literal(self.previous().literal)

        if self.match(TokenType.IDENTIFIER):
            return syntax.Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return syntax.Grouping(expr)

        raise ParseError(self.peek(), "Expect expression.")

    # helpers

    def match(self, *token_types):
        """Consumes the next token if it has any of token_types."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise ParseError(self.peek(), message)

    def check(self, token_type):
        return not self.at_end() and self.peek().type is token_type

    def advance(self):
        if not self.at_end():
            self.current += 1
        return self.previous()

    def at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def report(self, token, message):
        """Records an error without unwinding."""
        self.errors.append(ParseError(token, message))

    def synchronize(self):
        """Discards tokens until just past a semicolon or just before a token that starts a statement."""
        self.advance()

        while not self.at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in Parser.BOUNDARIES:
                return
            self.advance()


def parse(tokens):
    """Returns (statements, errors) for tokens. statements may contain None for statements that failed to parse."""
    parser = Parser(tokens)
    return parser.parse(), parser.errors
