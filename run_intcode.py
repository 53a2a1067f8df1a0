#!/usr/bin/env python3
"""
Intcode interpreter

Usage:
    python3 run_intcode.py run program.int        # Run with stdin/stdout
    python3 run_intcode.py run -t -p program.int  # Trace, then dump memory
    python3 run_intcode.py debug program.int      # Interactive inspector
"""

import argparse
import sys

from errors import IntcodeError
from inspector import debug
from intcode import Program
from intcode_io import Input, Output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Intcode interpreter')
    sub = parser.add_subparsers(dest='command', required=True)

    run = sub.add_parser('run', help='Run program')
    run.add_argument('filename', help='Source code file')
    run.add_argument('-t', '--trace', action='store_true', help='Trace program execution')
    run.add_argument('-p', '--print', action='store_true', help='Print final memory status')

    dbg = sub.add_parser('debug', help='Interactively debug program')
    dbg.add_argument('filename', help='Source code file')
    return parser


def main(argv=None, stdin=None, stdout=None) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    try:
        prog = Program.from_file(args.filename)
    except (OSError, IntcodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == 'debug':
        debug(prog, stdin, stdout)
        return 0

    # Values travel as bytes on the standard streams
    inp = getattr(stdin, 'buffer', stdin)
    out = getattr(stdout, 'buffer', stdout)
    try:
        prog.run(0, args.trace, Input.reader(inp), Output.writer(out))
    except IntcodeError as e:
        out.flush()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.print:
        print(prog, file=stdout)
    return 0


if __name__ == '__main__':
    sys.exit(main())
