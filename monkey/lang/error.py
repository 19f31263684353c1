"""Error reporting for the monkey driver. Only GenericExceptions should reach the ErrorHandler during a run: if another
type of error makes it all the way there, it is assumed to be an internal issue.

Parse errors and evaluation Errors are values inside the core (see monkey.core); the Session turns them into
GenericExceptions at the boundary so they can be shown with a traceback and a caret under the offending token.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message. Each "{}" in msg is filled with the matching entry of exprs, in bold.
    exprs[0] is the offending source line, and [start, end) the offending span within it.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, messages=None):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.messages = messages if messages else [self.msg]
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.msg)


def escape(text):
    """Protects literal braces in text that is used as a GenericException msg."""
    return text.replace("{", "{{").replace("}", "}}")


class ErrorHandler:
    """Context manager that reports GenericExceptions (and unexpected Python errors) and decides whether to exit."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}  # path: (line, line_num)

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers the line an error is about to be reported for."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def _location(self):
        """(path, line_num) of the first registered line, or (None, None) if there is none."""
        for path, (line, line_num) in self.traceback.items():
            if line is not None:
                return path, line_num
        return None, None

    def warn(self, *args, **kwargs):
        """Generates and prints a warning message based on args. Never exits."""
        error = GenericException(*args, **kwargs)

        path, line_num = self._location()
        prefix = colored(f"{path}:{line_num}:{error.start + 1}: ", attrs=["bold"]) if path else ""

        print(prefix + colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error, fatal=None):
        """Prints error with the registered traceback. error must be a GenericException. Exits if fatal (defaults to
        self.fatal).
        """
        error_msg = ""
        lines = 0
        for path, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{path}', line {line_num}:\n"
                error_msg += f"    {line.strip()}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        prefix = colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"]) if error.internal else ""
        error_msg += "\n".join(prefix + colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + msg
                               for msg in error.messages)
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal if fatal is None else fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            # the host stack is gone: never safe to keep the session alive
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False), fatal=True)
        elif exc_type is GenericException:
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException(escape(f"unknown error: '{exc_type.__name__}: {exc_val}'"), internal=True))
            do_exit = True

        return not do_exit
