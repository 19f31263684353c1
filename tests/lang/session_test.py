import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from monkey.core.objects import Integer, String
from monkey.lang.error import ErrorHandler, GenericException
from monkey.lang.session import Session


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.lines = []
        self.handler = ErrorHandler(fatal=False)

    def write_source(self, source):
        file = tempfile.NamedTemporaryFile("w", suffix=".mk", delete=False, encoding="utf-8")
        with file:
            file.write(source)
        self.addCleanup(os.remove, file.name)
        return file.name

    def cmd_session(self, **kwargs):
        return Session(self.handler, Session.SH_FILE, cmd_line=True, out=self.lines.append, **kwargs)

    def test_file(self):
        path = self.write_source("let x = 10\nlet f = fn(n) {\n  if (n == 0) { return 0 }\n  n + f(n - 1)\n}\n\nf(x)\n")
        sess = Session(self.handler, path, cmd_line=False, out=self.lines.append)
        sess.run()

        self.assertEqual([Integer(55)], sess.results)
        self.assertEqual({}, sess.to_exec)

    def test_missing_file(self):
        with self.assertRaises(GenericException) as context:
            Session(self.handler, os.path.join(tempfile.gettempdir(), "does-not-exist.mk"), cmd_line=False)
        self.assertIn("could not be opened", context.exception.msg)

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, self.handler, Session.SH_FILE, cmd_line=False)

    def test_cmd_line_keeps_bindings(self):
        sess = self.cmd_session()
        self.assertFalse(self.handler.fatal)

        sess.add("let x = 5\n", 1)
        sess.run()
        sess.add("let double = fn(n) { n * 2 }\ndouble(x)\n", 2)
        sess.run()

        self.assertIsNone(sess.pop())
        self.assertEqual(Integer(10), sess.pop())
        self.assertEqual([], sess.results)

    def test_parse_errors(self):
        sess = self.cmd_session()
        with self.assertRaises(GenericException) as context:
            sess.add("let x 5\nlet = 1\n", 4)

        error = context.exception
        self.assertGreaterEqual(len(error.messages), 2)
        self.assertIn("expected next token to be ASSIGN, got INT instead", error.messages[0])
        self.assertEqual("let x 5", error.expr)
        self.assertEqual(6, error.start)
        self.assertEqual(("let x 5", 4), self.handler.traceback[Session.SH_FILE])
        self.assertEqual({}, sess.to_exec)

    def test_evaluation_error(self):
        sess = self.cmd_session()
        sess.add('let a = 1\nlet b = a + "s"\n', 7)

        with self.assertRaises(GenericException) as context:
            sess.run()

        error = context.exception
        self.assertEqual("unknown operator: INTEGER + STRING", error.msg)
        self.assertEqual("let b = a + \"s\"", error.expr)
        self.assertEqual(("let b = a + \"s\"", 8), self.handler.traceback[Session.SH_FILE])
        self.assertEqual([], sess.results)

    def test_error_in_braced_source(self):
        sess = self.cmd_session()
        sess.add("{[1]: 2}\n", 1)
        with self.assertRaises(GenericException) as context:
            sess.run()
        self.assertEqual("unusable as hash key: ARRAY", context.exception.msg)

    def test_puts_and_ast(self):
        sess = self.cmd_session(show_ast=True)
        sess.add('puts("hello ", 1 + 2)\n', 1)
        sess.run()

        self.assertEqual(['puts("hello ", (1 + 2))', "hello 3"], self.lines)
        self.assertEqual([None], sess.results)

    def test_warning(self):
        sess = self.cmd_session()
        sess.add("let len = 1\nlen\n", 1)

        stdout = io.StringIO()
        with redirect_stdout(stdout):
            sess.run()

        self.assertIn("warning: ", stdout.getvalue())
        self.assertIn("'len' is a built-in function", stdout.getvalue())
        self.assertIsNone(sess.pop())
        self.assertEqual(1, sess.env["len"].value)

    def test_preprocess_line(self):
        cases = [
            (("let x = 1", ""), ("let x = 1\n", True)),
            (("x\n", "let x = 1\n"), ("let x = 1\nx\n", True)),
            ((";", "let x = 1\n"), ("let x = 1\n", False)),
            (("  ;  ", ""), ("", False)),
            (("x;", ""), ("x;\n", True)),
        ]
        for args, expected in cases:
            self.assertEqual(expected, Session.preprocess_line(*args), args)

    def test_display(self):
        self.assertEqual("No output..", Session.display(None))
        self.assertEqual("Result = 55", Session.display(Integer(55)))
        self.assertEqual("Result = hi", Session.display(String("hi")))


if __name__ == '__main__':
    unittest.main()
