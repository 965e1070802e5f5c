# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import os
import sys

from .args import (
    add_generic_args, add_diff_args, add_filename_args, add_prettyprint_args,
    ConfigBackedParser, prettyprint_config_from_args,
    )
from .diffing import diff, DiffConfig
from .log import debug
from .prettyprint import pretty_print_resource_diff, PrintWriter
from .utils import EXPLICIT_MISSING_FILE, read_json, write_json, setup_std_streams


_description = ("Diff two json resource trees. The diff lists what "
                "turns TARGET into SOURCE, and can be applied with bpatch.")


def main_diff(args):
    """Main handler of the bdiff command"""
    for fn in (args.target, args.source):
        if fn != EXPLICIT_MISSING_FILE and not os.path.exists(fn):
            print("Missing file {}".format(fn))
            return 1

    target = read_json(args.target)
    source = read_json(args.source)

    config = DiffConfig(atomic_paths=args.atomic_paths)
    d = diff(target, source, config=config)
    if d is None:
        debug("No differences between %s and %s", args.target, args.source)

    out = getattr(args, 'out', None)
    if out:
        write_json(d, out)
    else:
        pretty_config = prettyprint_config_from_args(args, out=PrintWriter())
        pretty_print_resource_diff(args.target, args.source, target, d, pretty_config)

    return 0


def _build_arg_parser(prog="bdiff"):
    """Creates an argument parser for the bdiff command."""
    parser = ConfigBackedParser(
        description=_description,
        prog=prog,
        )
    add_generic_args(parser)
    add_diff_args(parser)
    add_prettyprint_args(parser)
    add_filename_args(parser, ["target", "source"])
    parser.add_argument(
        '--out',
        default=None,
        help="write the diff as json to this file instead of "
             "printing it.")
    return parser


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    setup_std_streams()
    return main_diff(_build_arg_parser().parse_args(args))


if __name__ == "__main__":
    sys.exit(main())
