"""Runs a lox script, or the interactive shell when no script is given. Installed as the `lox` console script.

Exit codes: 64 for command line misuse, 65 if the script has lexical, parse or resolution errors (nothing is executed),
70 for a runtime error, 74 if the script cannot be read, 0 otherwise.
"""

import argparse
import sys
import threading

from lox.lang.error import EX_OK, ErrorHandler, UsageError
from lox.lang.session import Session
from lox.lang.shell import Shell


STACK_SIZE = 512 * 1024 * 1024  # bytes, for the thread that runs lox code
RECURSION_LIMIT = 100000         # python frames; a lox call takes about a dozen


class ArgumentParser(argparse.ArgumentParser):
    """argparse reports misuse with exit status 2: lox uses 64 (EX_USAGE)."""

    def error(self, message):
        raise UsageError()


def build_parser():
    parser = ArgumentParser(prog="lox", description="Tree-walking interpreter for the lox scripting language.")
    parser.add_argument("file", help="script to run (if empty, goes to interactive mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the token stream before running")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree before running")
    return parser


def with_deep_stack(function, *args):
    """Calls function(*args) on a worker thread with a STACK_SIZE stack and RECURSION_LIMIT, so that the depth of lox
    recursion is bounded by memory instead of python's default limit. Returns the result, or re-raises whatever the call
    raised (SystemExit included) in the calling thread.
    """
    outcome = {}

    def target():
        try:
            outcome["result"] = function(*args)
        except BaseException as error:  # handed over to the calling thread
            outcome["error"] = error

    old_limit = sys.getrecursionlimit()
    old_size = threading.stack_size(STACK_SIZE)
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    try:
        worker = threading.Thread(target=target, name="lox", daemon=True)
        worker.start()
        worker.join()
    finally:
        threading.stack_size(old_size)
        sys.setrecursionlimit(old_limit)

    if "error" in outcome:
        raise outcome["error"]
    return outcome.get("result")


def run(error_handler, args):
    if args.file is not None:
        sess = Session(error_handler, args.file, show_tokens=args.tokens, show_ast=args.ast)
        sess.run()
    else:
        sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens, show_ast=args.ast)
        Shell(sess).cmdloop()


def main(argv=None):
    """Runs the lox interpreter. Returns the process exit code for a successful run: errors exit from ErrorHandler."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        with_deep_stack(run, error_handler, args)

    return EX_OK


if __name__ == "__main__":
    sys.exit(main())
