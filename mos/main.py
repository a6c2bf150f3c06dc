"""Uses the mos parser and reducer to interpret .mos files, or runs in command-line mode. Also uses the error handling
context manager. Called from the mos console script.
"""

import argparse
import os
import sys

from mos.lang.error import ErrorHandler
from mos.lang.session import Session
from mos.lang.shell import Shell


HISTORY = os.path.join(os.path.expanduser("~"), ".moshistory")
RECURSION_LIMIT = 10000


def main(argv=None):
    """Runs mos interpreter. Called from mos console script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="mos", description="Interpreter for the mos lambda calculus.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--history", default=HISTORY, help="command-line history file (default: %(default)s)")
        parser.add_argument("--trace", action="store_true", help="print every reduction step to stderr")
        parser.add_argument("--recursion-limit", type=int, default=RECURSION_LIMIT,
                            help="maximum reduction depth (default: %(default)s)")
        args = parser.parse_args(argv)

        sys.setrecursionlimit(args.recursion_limit)
        error_handler.trace = args.trace

        if args.file is not None:
            Session(error_handler, args.file).run()
        else:
            Shell(Session(error_handler), history_path=args.history).cmdloop()
