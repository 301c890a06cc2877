"""Error handling for the lox language. Every diagnostic is a LoxError: the pipeline stages collect them and hand them
back to their caller, and ErrorHandler reports them. If another type of error makes it all the way to ErrorHandler, it
is assumed to be an internal issue.

Exit codes follow the BSD sysexits convention.
"""

import sys

from termcolor import colored


EX_OK = 0
EX_USAGE = 64
EX_DATAERR = 65
EX_SOFTWARE = 70
EX_IOERR = 74
EX_INTERRUPT = 130


class LoxError(Exception):
    """A reportable lox error. Renders as `[line <N>] <Kind> Error<where>: <message>`."""
    kind = ""
    exit_code = EX_DATAERR

    def __init__(self, line, message, where=""):
        super().__init__(message)
        self.line = line
        self.message = message
        self.where = where

    @staticmethod
    def located(token):
        """Returns the at-context for token: ' at end' for the end of input, else ' at '<lexeme>''."""
        if token.is_eof:
            return " at end"
        return f" at '{token.lexeme}'"

    @property
    def label(self):
        return f"{self.kind} Error"

    def __str__(self):
        return f"[line {self.line}] {self.label}{self.where}: {self.message}"

    def __repr__(self):
        return f"{type(self).__name__}(line={self.line}, message='{self.message}')"


class LexicalError(LoxError):
    """Unexpected character or unterminated string. Never has an at-context."""
    kind = "Lexical"


class ParseError(LoxError):
    """Raised inside the parser to unwind to the nearest statement boundary."""
    kind = "Parse"

    def __init__(self, token, message):
        super().__init__(token.line, message, LoxError.located(token))
        self.token = token


class ResolutionError(LoxError):
    """Illegal self-reference, duplicate local declaration or top-level return."""
    kind = "Resolution"

    def __init__(self, token, message):
        super().__init__(token.line, message, LoxError.located(token))
        self.token = token


class LoxRuntimeError(LoxError):
    """Fatal to the current interpretation: aborts the remaining statements of the run."""
    kind = "Runtime"
    exit_code = EX_SOFTWARE

    def __init__(self, token, message):
        super().__init__(token.line, message, f" at '{token.lexeme}'")
        self.token = token


class SourceError(LoxError):
    """The program source could not be read."""
    exit_code = EX_IOERR

    def __init__(self, path, reason):
        super().__init__(0, reason)
        self.path = path

    def __str__(self):
        return f"Error reading file '{self.path}': {self.message}"


class InternalError(LoxError):
    """A Python error escaped the pipeline."""
    kind = "Internal"
    exit_code = EX_SOFTWARE

    def __init__(self, message):
        super().__init__(0, message)

    def __str__(self):
        return f"{self.label}: {self.message}"


class UsageError(LoxError):
    """Command line misuse."""
    exit_code = EX_USAGE

    def __init__(self, message="Usage: lox [script]"):
        super().__init__(0, message)

    def __str__(self):
        return self.message


class ErrorHandler:
    """Context manager that reports lox errors and converts escaping Python errors into lox errors. If fatal, the first
    thrown error exits the process with that error's exit code.
    """
    ERROR = "red"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream  # resolved lazily so that a replaced sys.stderr is honored
        self.errors = []

    @property
    def had_error(self):
        return bool(self.errors)

    @property
    def exit_code(self):
        """Exit code of the first error thrown so far, EX_OK if there was none."""
        return self.errors[0].exit_code if self.errors else EX_OK

    def reset(self):
        """Forgets previously thrown errors. Called by the shell between lines."""
        self.errors = []

    def format(self, error):
        """Returns error's report line, with the kind label highlighted."""
        if not error.line:
            return colored(str(error), ErrorHandler.ERROR, attrs=["bold"])

        header = f"[line {error.line}] "
        return header + colored(error.label, ErrorHandler.ERROR, attrs=["bold"]) + f"{error.where}: {error.message}"

    def throw(self, *errors):
        """Reports every error, in order. Exits with the first error's exit code if this handler is fatal."""
        stream = self.stream if self.stream is not None else sys.stderr
        for error in errors:
            print(self.format(error), file=stream)
            self.errors.append(error)

        if errors and self.fatal:
            sys.exit(errors[0].exit_code)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            stream = self.stream if self.stream is not None else sys.stderr
            print(colored("keyboard interrupt", ErrorHandler.ERROR, attrs=["bold"]), file=stream)
            sys.exit(EX_INTERRUPT)
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is not None and issubclass(exc_type, LoxError):
            self.throw(exc_val)
        elif exc_type is RecursionError:
            self.throw(InternalError("Stack overflow."))
        elif exc_type is not None:
            self.throw(InternalError(f"unknown error: '{exc_type.__name__}: {exc_val}'"))
            do_exit = True

        return not do_exit
