import io
import os
import re
import tempfile
import unittest

from lox.lang.error import ErrorHandler, LexicalError, LoxRuntimeError, ParseError, ResolutionError, SourceError
from lox.lang.session import Session

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        self.sess = Session(ErrorHandler(fatal=False, stream=self.err), cmd_line=True, out=self.out)

    def output(self):
        return self.out.getvalue().splitlines()

    def reported(self):
        return ANSI.sub("", self.err.getvalue()).splitlines()

    def test_run(self):
        self.assertEqual([], self.sess.run("var a = 1;\nprint a + 2;"))
        self.assertEqual(["3"], self.output())
        self.assertEqual([], self.reported())

    def test_globals_persist(self):
        self.sess.run("fun square(x) { return x * x; }")
        self.sess.run("var n = square(4);")
        self.sess.run("print n;")
        self.assertEqual(["16"], self.output())

    def test_static_errors_skip_execution(self):
        errors = self.sess.run("print 1;\nprint 1 @;\nprint (2;")

        self.assertEqual([LexicalError, ParseError], [type(error) for error in errors])
        self.assertEqual([], self.output())
        self.assertEqual(
            ["[line 2] Lexical Error: Unexpected character.",
             "[line 3] Parse Error at ';': Expect ')' after expression."],
            self.reported()
        )

    def test_resolution_errors_skip_execution(self):
        errors = self.sess.run("print 1;\n{ var a = a; }")

        self.assertEqual([ResolutionError], [type(error) for error in errors])
        self.assertEqual([], self.output())

    def test_runtime_error_aborts(self):
        errors = self.sess.run("print 1;\nprint -nil;\nprint 2;")

        self.assertEqual([LoxRuntimeError], [type(error) for error in errors])
        self.assertEqual(["1"], self.output())
        self.assertEqual(["[line 2] Runtime Error at '-': Operand must be a number."], self.reported())

    def test_shadowing_known_global(self):
        self.sess.run("var a = 1;")
        self.assertEqual([], self.sess.run("{ var a = a + 1; print a; }"))
        self.assertEqual(["2"], self.output())

    def test_first_line(self):
        self.sess.run("print nil * 2;", line=12)
        self.assertEqual(["[line 12] Runtime Error at '*': Operands must be numbers."], self.reported())

    def test_nesting_too_deep(self):
        errors = self.sess.run("print 1;\n{" + "{" * 50000 + "}" * 50000 + "}")

        self.assertEqual([LoxRuntimeError], [type(error) for error in errors])
        self.assertEqual([], self.output())
        self.assertEqual(["[line 2] Runtime Error at '{': Stack overflow."], self.reported())

    def test_echo(self):
        self.sess.run("1 + 2;")
        self.sess.run("var a = \"x\";")
        self.sess.run("a;")
        self.sess.run("a; a;")
        self.sess.run("clock;")
        self.assertEqual(["3", "x", "<native fn>"], self.output())

    def test_dumps(self):
        sess = Session(ErrorHandler(fatal=False, stream=self.err), cmd_line=True, out=self.out, show_tokens=True,
                       show_ast=True)
        sess.run("print 1;")
        self.assertEqual(["PRINT print null", "NUMBER 1 1.0", "SEMICOLON ; null", "EOF  null", "(print 1)", "1"],
                         self.output())


class FileTestCase(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.dir.name, "script.lox")

    def tearDown(self):
        self.dir.cleanup()

    def test_file(self):
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("fun greet(name) { return \"hello \" + name; }\nprint greet(\"lox\");\ngreet(\"x\");\n")

        out = io.StringIO()
        sess = Session(ErrorHandler(fatal=False, stream=io.StringIO()), self.path, out=out)
        self.assertEqual([], sess.run())
        self.assertEqual("hello lox\n", out.getvalue())

    def test_source_errors(self):
        should_fail = [
            lambda: Session(ErrorHandler(fatal=False), os.path.join(self.dir.name, "missing.lox")),
            lambda: Session(ErrorHandler(fatal=False), self.dir.name),
            lambda: Session(ErrorHandler(fatal=False), Session.SH_FILE),
        ]
        for case in should_fail:
            with self.assertRaises(SourceError):
                case()

    def test_fatal_handler(self):
        with open(self.path, "w", encoding="utf-8") as file:
            file.write("print 1 +;")

        sess = Session(ErrorHandler(stream=io.StringIO()), self.path, out=io.StringIO())
        with self.assertRaises(SystemExit) as context:
            sess.run()
        self.assertEqual(65, context.exception.code)


if __name__ == '__main__':
    unittest.main()
