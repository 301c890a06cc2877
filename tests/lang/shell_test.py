import io
import re
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell, unclosed_braces

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.sess = Session(ErrorHandler(stream=self.err), cmd_line=True, out=self.out)
        self.shell = Shell(self.sess, stdout=self.out)

    def feed(self, *lines):
        for line in lines:
            self.shell.onecmd(line)

    def output(self):
        return self.out.getvalue().splitlines()

    def reported(self):
        return ANSI.sub("", self.err.getvalue()).splitlines()

    def test_not_fatal(self):
        self.assertFalse(self.sess.error_handler.fatal)

    def test_echo_and_print(self):
        self.feed("var a = 2;", "a * 3;", "print a;")
        self.assertEqual(["6", "2"], self.output())

    def test_continuation(self):
        self.feed("fun add(a, b) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.feed("  return a + b;", "}")
        self.assertEqual(Shell.prompt, self.shell.prompt)

        self.feed("add(1, 2);")
        self.assertEqual(["3"], self.output())

    def test_errors_do_not_end_session(self):
        self.feed("print x;", "var x = 1;", "print x;")
        self.assertEqual(["1"], self.output())
        self.assertEqual(["[line 1] Runtime Error at 'x': Undefined variable 'x'."], self.reported())
        self.assertFalse(self.sess.error_handler.had_error)

    def test_braces_in_strings_and_comments(self):
        self.feed("print \"{\";", "print 1; // {", "print \"}\";")
        self.assertEqual(Shell.prompt, self.shell.prompt)
        self.assertEqual(["{", "1", "}"], self.output())

        self.feed("{ // }", "print \"}\";", "}")
        self.assertEqual(["{", "1", "}", "}"], self.output())

    def test_unclosed_braces(self):
        cases = {
            "{": 1,
            "{ { }": 1,
            "{ }": 0,
            "print \"{\";": 0,
            "// {": 0,
            "fun f() { print \"}\"; // }": 1,
            "}": -1,
        }
        for case, expected in cases.items():
            self.assertEqual(expected, unclosed_braces(case), case)

    def test_line_numbers(self):
        self.feed("print 1;", "{", "", "print -nil;", "}")
        self.assertEqual(["1"], self.output())
        self.assertEqual(["[line 4] Runtime Error at '-': Operand must be a number."], self.reported())

    def test_help_and_exit(self):
        self.feed("help")
        self.assertIn("Welcome to the lox interpreter!", self.out.getvalue())

        self.assertFalse(self.shell.emptyline())
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("EOF"))

    def test_cmdloop(self):
        shell = Shell(self.sess, stdin=io.StringIO("var a = 1;\n{\nprint a + 1;\n}\nexit\n"), stdout=self.out)
        shell.use_rawinput = False
        shell.cmdloop(intro="")
        self.assertIn("2\n", self.out.getvalue())


if __name__ == '__main__':
    unittest.main()
