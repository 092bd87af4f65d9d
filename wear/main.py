"""Runs WeaR source files, or the interactive shell when no file is given. Also uses the error handling context
manager, so users only ever see WeaR errors. Installed as the `wear` console script.
"""

import argparse
import logging
import sys

from wear.lang.config import load_language, register_language
from wear.lang.error import ErrorHandler
from wear.lang.session import Session, read_source
from wear.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="wear", description="WeaR Lang interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to interactive mode)", nargs="?")
    parser.add_argument("-l", "--lang", default="en", help="keyword language code (default: en)")
    parser.add_argument("--keywords", metavar="PATH", help="JSON language configuration to register and use")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree instead of running the file")
    parser.add_argument("--no-color", action="store_true", help="do not highlight errors")
    parser.add_argument("-v", "--verbose", action="store_true", help="log pipeline stages to stderr")
    return parser


def configure_logging(verbose):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def main(argv=None):
    """Runs WeaR interpreter. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    with ErrorHandler(color=not args.no_color) as error_handler:
        lang = args.lang
        if args.keywords:
            config = load_language(args.keywords)
            register_language(config)
            lang = config.code

        if args.file is None:
            error_handler.fatal = False  # errors must not end the shell
            Shell(Session(lang), error_handler).cmdloop()
            return 0

        sess = Session(lang)
        source = read_source(args.file)

        if args.ast:
            program, diagnostics = sess.parse(source)
            if program is None:
                error_handler.display(diagnostics, path=args.file)
                return 1
            print(program.display())
            return 0

        result = sess.run(source)
        if not result.success:
            error_handler.display(result.diagnostics, path=args.file)
            return 1
        return 0

    return 1  # an error was thrown and handled


if __name__ == "__main__":
    sys.exit(main())
