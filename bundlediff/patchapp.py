# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import json
import os
import sys

from .args import ConfigBackedParser, add_generic_args, add_filename_args
from .log import info
from .patching import patch, apply_object_diff
from .registry import TypeRegistry
from .utils import EXPLICIT_MISSING_FILE, read_json, write_json, setup_std_streams


_description = ("Apply a diff written by bdiff to a json resource tree, "
                "optionally as a typed instance described by a class schema.")


def patch_typed(base, di, schema, class_name=None):
    """Patch base as a typed instance and serialize the result.

    Fields the schema does not know are dropped from the output.
    """
    registry = TypeRegistry.load(schema)
    instance = registry.instance_from_json(base, class_name)
    instance = apply_object_diff(instance, di, registry)
    info("Patched %s instance using schema %s", instance.type_name, schema)
    return registry.instance_to_json(instance)


def main_patch(args):
    for fn in (args.base, args.patch):
        if fn != EXPLICIT_MISSING_FILE and not os.path.exists(fn):
            print("Missing file {}".format(fn))
            return 1

    base = read_json(args.base)
    di = read_json(args.patch)

    if args.schema:
        patched = patch_typed(base, di, args.schema, args.type)
    else:
        patched = patch(base, di)

    if args.output:
        write_json(patched, args.output)
    else:
        print(json.dumps(patched, indent=2, separators=(",", ": ")))
    return 0


def _build_arg_parser(prog="bpatch"):
    """Creates an argument parser for the bpatch command."""
    parser = ConfigBackedParser(
        description=_description,
        prog=prog,
        add_help=True,
        )
    add_generic_args(parser)
    add_filename_args(parser, ["base", "patch"])
    parser.add_argument(
        '-o', '--output',
        default=None,
        help="write the patched tree to this file instead of "
             "printing it.")
    parser.add_argument(
        '--schema',
        default=None,
        help="class schema (json); patch the base as a typed instance.")
    parser.add_argument(
        '--type',
        default=None,
        help="class of the base when it carries no $type tag, "
             "used with --schema.")
    return parser


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    setup_std_streams()
    return main_patch(_build_arg_parser().parse_args(args))


if __name__ == "__main__":
    sys.exit(main())
