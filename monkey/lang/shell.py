"""Handles interactive/command-line mode for the monkey interpreter. Uses cmd as backend."""

import cmd

from monkey.lang.session import Session


class Shell(cmd.Cmd):
    """Monkey interpreter shell. Lines are buffered until a line holding only ';', then run as one group."""
    intro = "Monkey interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    secondary_prompt = ". "  # used while a statement group is open
    _tmp_prompt = ">> "      # also used for prompt swapping in statement groups

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0
        self._group_start = 1

    def onecmd(self, line):
        """Only a bare command word (or an empty line) reaches cmd.Cmd. Anything else is monkey code, even when it
        starts with a command name, e.g. 'exit + 1' or 'help(3)'.
        """
        if not line.strip() or line.strip() in ("help", "?", "exit", "EOF"):
            return super().onecmd(line)
        return self.default(line)

    def default(self, line):
        """Buffers a line of monkey code, running the group once the sentinel line arrives."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._group_start = self.line_num

            group, add_to_prev = Session.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = group
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            if not group.strip():
                return  # sentinel with nothing buffered

            self.sess.add(group, self._group_start)
            self.sess.run()

            if self.sess.results:
                result = self.sess.pop()
                if result is not None:
                    self.stdout.write(result.inspect() + "\n")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        self.stdout.write(
            "Welcome to the monkey interpreter!\n\n"
            "Type statements over as many lines as you like, then a line holding only ';' to run\n"
            "them. Bindings made with 'let' are kept for the rest of the session.\n\n"
            "Try it out by typing 'let add = fn(a, b) { a + b }', then 'add(2, 3)', then ';'.\n"
            "Built-in functions: puts, toStr, len, first, last, rest, push.\n")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        self.stdout.write("\n")
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
