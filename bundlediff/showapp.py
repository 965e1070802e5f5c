# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import os
import sys

from .args import (
    add_generic_args, add_prettyprint_args, ConfigBackedParser,
    prettyprint_config_from_args,
)
from .prettyprint import diff_tree, pretty_print_diff, Missing, PrintWriter
from .utils import read_json, setup_std_streams


_description = """Show bdiff diffs in the terminal.
Lists added, changed and removed values; pass --base with the
diffed tree to see the removed values too. --tree prints one
`path: value` line per changed value instead.
"""

# Separates the diffs of several files, like more(1) does
FILE_SEPARATOR = ":" * 14


def main_show(args):
    if args.diff == ["-"]:
        files = [sys.stdin]
    elif not args.diff:
        print("Missing filenames.")
        return 1
    else:
        for fn in args.diff:
            if not os.path.exists(fn):
                print("Missing file {}".format(fn))
                return 1
        files = args.diff

    base = Missing
    if args.base:
        if not os.path.exists(args.base):
            print("Missing file {}".format(args.base))
            return 1
        base = read_json(args.base)

    out = PrintWriter()
    for f in files:
        di = read_json(f)
        if len(files) > 1:
            print(FILE_SEPARATOR)
            print(getattr(f, "name", f))
            print(FILE_SEPARATOR)

        if args.tree:
            out.write(diff_tree(di))
        else:
            pretty_print_diff(base, di, "", prettyprint_config_from_args(args, out=out))

    return 0


def _build_arg_parser(prog="bshow"):
    """Creates an argument parser for the bshow command."""
    parser = ConfigBackedParser(
        description=_description,
        prog=prog,
        add_help=True,
        )
    add_generic_args(parser)
    add_prettyprint_args(parser)
    parser.add_argument("diff", nargs="*", help="diff file(s), or - for stdin.")
    parser.add_argument(
        '--base',
        default=None,
        help="the tree the diffs were made against, to show removed values.")
    parser.add_argument(
        '--tree',
        action='store_true',
        default=False,
        help="print one `path: value` line per changed value.")
    return parser


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    setup_std_streams()
    return main_show(_build_arg_parser().parse_args(args))


if __name__ == "__main__":
    sys.exit(main())
