import io
import unittest
from contextlib import redirect_stdout

from monkey.lang.error import ErrorHandler, GenericException, escape


class GenericExceptionTestCase(unittest.TestCase):

    def test_format(self):
        error = GenericException("'{}' could not be opened", "prog.mk", diagnosis=False)
        self.assertIn("prog.mk", error.msg)
        self.assertIn("could not be opened", error.msg)
        self.assertEqual([error.msg], error.messages)
        self.assertEqual(("prog.mk", 0, 7), (error.expr, error.start, error.end))

    def test_messages(self):
        error = GenericException("first", messages=["first", "second"])
        self.assertEqual(["first", "second"], error.messages)
        self.assertEqual("", error.expr)

    def test_escape(self):
        cases = {"{}": "{{}}", "fn() { x }": "fn() {{ x }}", "plain": "plain"}
        for case, expected in cases.items():
            self.assertEqual(expected, escape(case))
            self.assertEqual(case, GenericException(escape(case)).msg)


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.stdout = io.StringIO()

    def test_diagnose(self):
        error = GenericException("identifier not found: y", "let x = y", start=8, end=9)
        diagnosis = ErrorHandler.diagnose(error)

        source_line, caret_line = diagnosis.split("\n")
        self.assertTrue(source_line.startswith("  let x = "))
        self.assertIn("y", source_line)
        self.assertTrue(caret_line.startswith("  " + " " * 8))
        self.assertIn("^", caret_line)

    def test_throw(self):
        handler = ErrorHandler(fatal=False)
        handler.register_file("prog.mk")
        handler.register_line("prog.mk", "let x = y", 3)

        with redirect_stdout(self.stdout):
            handler.throw(GenericException("identifier not found: y", "let x = y", start=8, end=9))

        output = self.stdout.getvalue()
        self.assertIn("File 'prog.mk', line 3:", output)
        self.assertIn("error: ", output)
        self.assertIn("identifier not found: y", output)
        self.assertEqual((None, None), handler.traceback["prog.mk"])

    def test_throw_all_messages(self):
        handler = ErrorHandler(fatal=False)
        with redirect_stdout(self.stdout):
            handler.throw(GenericException("one", messages=["one", "two"]))
        self.assertEqual(2, self.stdout.getvalue().count("error: "))

    def test_fatal(self):
        handler = ErrorHandler()
        with redirect_stdout(self.stdout), self.assertRaises(SystemExit) as context:
            handler.throw(GenericException("boom"))
        self.assertEqual(1, context.exception.code)

    def test_warn(self):
        handler = ErrorHandler()
        handler.register_file("<in>")
        handler.register_line("<in>", "let len = 1", 2)

        with redirect_stdout(self.stdout):
            handler.warn("shadowed", "let len = 1", start=4, end=7)

        output = self.stdout.getvalue()
        self.assertIn("<in>:2:5: ", output)
        self.assertIn("warning: ", output)
        self.assertIn("shadowed", output)
        self.assertIn("^~~", output)

    def test_context_manager(self):
        with redirect_stdout(self.stdout):
            with ErrorHandler(fatal=False):
                raise GenericException("recoverable")
        self.assertIn("recoverable", self.stdout.getvalue())

        with redirect_stdout(self.stdout), self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False):
                raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", self.stdout.getvalue())

        with redirect_stdout(self.stdout), self.assertRaises(ValueError):
            with ErrorHandler(fatal=False):
                raise ValueError("bug")
        self.assertIn("[internal] ", self.stdout.getvalue())
        self.assertIn("unknown error: 'ValueError: bug'", self.stdout.getvalue())

    def test_system_exit_passes_through(self):
        with self.assertRaises(SystemExit):
            with ErrorHandler(fatal=False):
                raise SystemExit(0)


if __name__ == '__main__':
    unittest.main()
