"""Uses implementation of pure lambda calculus/lcrepl language to interpret .lc files, or run in command-line mode.
Also uses error handling context manager. Called from the lcrepl console script.

Python version must be >=3.8, because error handling requires that dicts are insertion-ordered.
"""

import argparse
import sys

from lcrepl.lang.error import ErrorHandler
from lcrepl.lang.session import Session
from lcrepl.lang.shell import Shell
from lcrepl.pure.reduction import NormalOrderReducer


def positive_int(value):
    """argparse type for the step limit."""
    try:
        limit = int(value)
        assert limit >= 1
    except (AssertionError, ValueError):
        raise argparse.ArgumentTypeError(f"expected a positive integer, got '{value}'")
    return limit


def build_parser():
    parser = argparse.ArgumentParser(prog="lcrepl", description="Normal-order lambda calculus interpreter.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--limit", type=positive_int, default=NormalOrderReducer.DEFAULT_LIMIT,
                        help=f"maximum number of β-reductions per term (default: {NormalOrderReducer.DEFAULT_LIMIT})")
    parser.add_argument("--trace", action="store_true", help="print every β-reduction step")
    return parser


def main(argv=None):
    """Runs lcrepl interpreter. Called from lcrepl executable script."""
    assert sys.version_info >= (3, 8), "lcrepl cannot be run with python < 3.8"

    args = build_parser().parse_args(argv)

    with ErrorHandler(trace=args.trace) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file, limit=args.limit)
            sess.run()

            while sess.results:
                print(sess.pop())

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, limit=args.limit, color=sys.stdout.isatty())
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
