"""Handles interactive mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.core.lexical import TokenType, scan


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: tree-walking Python backend\nType 'help' for more information, 'exit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._tmp_line_num = 0  # line number of the first buffered line
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary lox code. Lines are buffered while braces are unbalanced."""
        self.line_num += 1
        if not self._tmp_line:
            self._tmp_line_num = self.line_num

        line = self._tmp_line + line + "\n"
        if unclosed_braces(line) > 0:
            self._tmp_line = line
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run(line, self._tmp_line_num)
        self.sess.error_handler.reset()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with C-like syntax, first-class\n"
              "functions and lexical closures. Statements end with ';' and blocks are wrapped in\n"
              "braces; a block may span several lines.\n\n"
              "Try it out by typing 'fun add(a, b) { return a + b; }'. Next, try typing\n"
              "'add(1, 2);'. A line holding a single expression shows its value, here '3'.",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        if self._tmp_line:
            self.line_num += 1
            self._tmp_line += "\n"
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def unclosed_braces(source):
    """Number of `{` tokens in source left without a matching `}`. Braces inside strings and comments don't count."""
    tokens, __ = scan(source)
    types = [token.type for token in tokens]
    return types.count(TokenType.LEFT_BRACE) - types.count(TokenType.RIGHT_BRACE)
