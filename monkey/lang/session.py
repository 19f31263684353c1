"""Session control for the monkey interpreter: source text -> Parser -> Evaluator, either for a whole file or for
statement groups typed at the command line.

A Session owns one Environment for its whole lifetime, so let bindings made by one group are visible to the next. Parse
errors and evaluation Errors are turned into GenericExceptions here, pointing at the token that caused them.
"""

from monkey.core.builtins import Builtins
from monkey.core.environment import Environment
from monkey.core.evaluator import Evaluator
from monkey.core.lexical import Lexer
from monkey.core.objects import Error
from monkey.core.parser import Parser
from monkey.core.tokens import TokenType
from monkey.lang.error import GenericException, escape


class Session:
    """Governs a monkey session: pending programs, their results, and the environment they share."""
    SH_FILE = "<in>"  # command-line interpreter filename
    SENTINEL = ";"    # a line holding only this ends a statement group in command-line mode

    def __init__(self, error_handler, path, cmd_line, out=print, show_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.out = out            # where puts and --ast output goes
        self.show_ast = show_ast  # echo the rendering of every parsed program

        self.env = Environment()
        self.evaluator = Evaluator(Builtins(out), warn=self.warn)

        self.to_exec = {}   # dict of line num: (source, Program) to evaluate
        self.results = []   # evaluated results, oldest first
        self._running = None  # (source, line num) being evaluated, for warnings

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            self.add(source, 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, buffered=""):
        """Adds a command-line line to the buffered statement group. Returns the updated group and whether it is still
        open (more lines expected). A line holding only the sentinel closes the group without being added to it.
        """
        if line.strip() == Session.SENTINEL:
            return buffered, False
        return buffered + line.rstrip("\n") + "\n", True

    @staticmethod
    def display(result):
        """Display form of a program result, as printed by the file-mode driver."""
        return "No output.." if result is None else f"Result = {result.inspect()}"

    def _locate(self, source, line_num, token):
        """Returns (source line, its line number, start, end) of token within source, first line being line_num."""
        lines = source.splitlines()
        line = lines[token.line - 1] if 0 < token.line <= len(lines) else ""

        start = max(token.column - 1, 0)
        width = len(token.literal) + (2 if token.kind is TokenType.STRING else 0)
        return line, line_num + max(token.line, 1) - 1, start, start + max(width, 1)

    def _exception(self, source, line_num, token, message, messages=None):
        """GenericException for message, registered against the line token came from."""
        if token is None:
            return GenericException(escape(message), diagnosis=False, messages=messages)

        line, actual_line_num, start, end = self._locate(source, line_num, token)
        self.error_handler.register_line(self.path, line, actual_line_num)
        return GenericException(escape(message), line, start=start, end=end, messages=messages)

    def add(self, source, line_num=1):
        """Parses source (which starts at line_num of this session's input) and queues it for run. Raises a
        GenericException listing every parse error if there is any: an erroring program is never evaluated.
        """
        parser = Parser(Lexer(source))
        program = parser.parse_program()

        if parser.has_errors:
            message, token = parser.diagnostics[0]
            raise self._exception(source, line_num, token, message, messages=parser.errors)

        if self.show_ast:
            self.out(str(program).rstrip("\n"))

        self.to_exec[line_num] = (source, program)

    def run(self):
        """Evaluates every queued program in order against the session environment. Raises a GenericException for an
        evaluation Error.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            del self.to_exec[line_num]

            self._running = (source, line_num)
            try:
                result = self.evaluator.eval(program, self.env)
            finally:
                self._running = None

            if isinstance(result, Error):
                raise self._exception(source, line_num, result.token, result.message)

            self.results.append(result)
            self.error_handler.remove_line(self.path)

    def warn(self, message, token):
        """Evaluator warning callback: reports message against token of the program being run."""
        if self._running is None:
            self.error_handler.warn(escape(message), diagnosis=False)
            return

        source, line_num = self._running
        line, actual_line_num, start, end = self._locate(source, line_num, token)

        self.error_handler.register_line(self.path, line, actual_line_num)
        self.error_handler.warn(escape(message), line, start=start, end=end)
        self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the oldest result."""
        return self.results.pop(0)
