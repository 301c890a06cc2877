"""Session control for the lox language. Runs source text through the pipeline (scan, parse, resolve, interpret),
either once for a whole file or a chunk at a time for the shell.

Errors found before interpretation (lexical, parse and resolution errors) are all reported together and interpretation
is skipped. A runtime error aborts the rest of the run and is reported on its own.
"""

import sys

from lox.core import syntax
from lox.core.interpreter import Interpreter
from lox.core.lexical import scan
from lox.core.parser import parse
from lox.core.printer import AstPrinter
from lox.core.resolver import resolve
from lox.core.runtime import stringify
from lox.lang.error import SourceError


class Session:
    """Governs a lox session: one interpreter, so globals persist across runs."""
    SH_FILE = "<stdin>"  # shell pseudo-filename

    def __init__(self, error_handler, path=SH_FILE, cmd_line=False, out=None, show_tokens=False, show_ast=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in shell mode
        self.out = out if out is not None else sys.stdout

        self.show_tokens = show_tokens  # debug dumps, printed before execution
        self.show_ast = show_ast

        self.interpreter = Interpreter(self.out)
        self.source = None

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = file.read()
            except (OSError, UnicodeDecodeError) as error:
                raise SourceError(path, getattr(error, "strerror", None) or str(error))

        elif not cmd_line:
            raise SourceError(path, f"'{Session.SH_FILE}' is a reserved filename")

    def run(self, source=None, line=1):
        """Runs source (this session's file if None), whose first line is numbered line. Returns the errors that were
        thrown, which is empty if the run succeeded.
        """
        if source is None:
            source = self.source

        tokens, errors = scan(source, line)
        if self.show_tokens:
            for token in tokens:
                print(token, file=self.out)

        statements, parse_errors = parse(tokens)
        errors += parse_errors
        if errors:
            return self._throw(errors)

        if self.show_ast:
            printer = AstPrinter()
            for stmt in statements:
                print(printer.print(stmt), file=self.out)

        locals_, errors = resolve(statements, self.interpreter.globals.values)
        if errors:
            return self._throw(errors)

        error = self.interpreter.interpret(statements, locals_)
        if error is not None:
            return self._throw([error])

        if self.cmd_line:
            self._echo(statements)
        return []

    def _throw(self, errors):
        self.error_handler.throw(*errors)
        return errors

    def _echo(self, statements):
        """In the shell, a line that is a lone expression shows its value. The expression is not evaluated twice:
        the value is recovered from the interpreter's last evaluation.
        """
        if len(statements) == 1 and isinstance(statements[0], syntax.Expression):
            print(stringify(self.interpreter.last_value), file=self.out)
