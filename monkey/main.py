"""Runs the monkey interpreter on a source file, or in command-line mode when no file is given. Installed as the
`monkey` console script. Errors are reported through the ErrorHandler context manager.
"""

import argparse
import sys

from monkey.lang.error import ErrorHandler
from monkey.lang.session import Session
from monkey.lang.shell import Shell

DEFAULT_RECURSION_LIMIT = 10000  # every monkey call costs a dozen or so Python frames


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="monkey", description="Interpreter for the monkey programming language.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--ast", action="store_true", help="print the parsed program before evaluating it")
    parser.add_argument("--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
                        help=f"host recursion limit while evaluating (default: {DEFAULT_RECURSION_LIMIT})")
    return parser


def main(argv=None):
    """Runs monkey interpreter. Called from the monkey console script."""
    with ErrorHandler() as error_handler:
        args = build_arg_parser().parse_args(argv)
        sys.setrecursionlimit(args.recursion_limit)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_ast=args.ast)
            sess.run()

            for result in sess.results:
                print(Session.display(result))

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, show_ast=args.ast)).cmdloop()


if __name__ == "__main__":
    main()
