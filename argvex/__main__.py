"""
Command-line wrapper: `python -m argvex TOKEN...` (or the `argvex` script).

Parses its own arguments without a schema and pretty-prints the result with
rich. A parse fault is rendered on stderr and the process exits with status 1.
"""
import sys

from rich.console import Console
from rich.pretty import pprint

from .faults import ParseError, trigger
from .scanner import parse

console = Console()


def main(*varargs, colorful=True, fancy=False):
    """
    Parse varargs and print the result; return 0 on success.

    On a ParseError the fault is triggered in shell mode, which renders it and
    exits with status 1 (SystemExit).
    """
    try:
        parsed = parse(varargs)
    except ParseError as error:
        trigger(error, shell=True, colorful=colorful, fancy=fancy)
    else:
        pprint(parsed, console=console, expand_all=True)
        return 0


def run():
    sys.exit(main(*sys.argv[1:], colorful=console.is_terminal))


if __name__ == '__main__':
    run()
