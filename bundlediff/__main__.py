# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import importlib
import sys

from ._version import __version__

COMMANDS = {
    "diff": "bundlediff.diffapp",
    "patch": "bundlediff.patchapp",
    "show": "bundlediff.showapp",
}

HELP_MESSAGE_VERBOSE = """\
Usage: bundlediff COMMAND [ARGS] | --version | --config | -h

Commands: {commands}

Examples: bundlediff diff base.json modded.json --out mod.diff.json
          bundlediff patch base.json mod.diff.json -o patched.json
          bundlediff show mod.diff.json --tree
""".format(commands=", ".join(COMMANDS))


def print_all_config():
    "Print the config options of every command with their current values."
    from .args import modify_config_for_print
    from .config import build_config, entrypoint_configurables
    from .prettyprint import pretty_print_dict, PrettyPrintConfig

    print('Config options and their current values:\n', file=sys.stderr)
    for entrypoint, cls in entrypoint_configurables.items():
        printable = modify_config_for_print(build_config(entrypoint, True))
        pretty_print_dict({cls.__name__: printable}, config=PrettyPrintConfig(out=sys.stderr))
        print('', file=sys.stderr)


def main_dispatch(args=None):
    if args is None:
        args = sys.argv[1:]
    if not args:
        sys.exit("Missing command.\n\n%s" % HELP_MESSAGE_VERBOSE)

    cmd, args = args[0], args[1:]
    if cmd in COMMANDS:
        app = importlib.import_module(COMMANDS[cmd])
        return app.main(args)

    if cmd == '--version':
        sys.exit(__version__)
    if cmd in ('-h', '--help'):
        sys.exit(HELP_MESSAGE_VERBOSE)
    if cmd == '--config':
        print_all_config()
        sys.exit(1)
    sys.exit("Unrecognized command '%s'\n\n%s" % (cmd, HELP_MESSAGE_VERBOSE))


if __name__ == "__main__":
    # python -m bundlediff
    sys.exit(main_dispatch())
