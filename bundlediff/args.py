# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import argparse
import json
import logging
import sys

from ._version import __version__
from .config import build_config, entrypoint_configurables
from .log import init_logging, set_bundlediff_log_level


LOG_LEVELS = ('DEBUG', 'INFO', 'WARN', 'ERROR', 'CRITICAL')


class ConfigBackedParser(argparse.ArgumentParser):
    """Argument parser taking its defaults from the config files.

    The entrypoint is looked up from the first word of prog, so
    subcommand parsers share the config of their app.
    """

    def parse_known_args(self, args=None, namespace=None):
        entrypoint = self.prog.split(' ')[0]
        if entrypoint in entrypoint_configurables:
            self.set_defaults(**build_config(entrypoint))
        return super(ConfigBackedParser, self).parse_known_args(args=args, namespace=namespace)


class LogLevelAction(argparse.Action):
    def __init__(self, option_strings, dest, default=None, **kwargs):
        # Not called at all when the option is absent, so set up here
        level = getattr(logging, default or 'INFO')
        init_logging(level=level)
        set_bundlediff_log_level(level)
        super(LogLevelAction, self).__init__(option_strings, dest, default=default, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        setattr(namespace, self.dest, values)
        set_bundlediff_log_level(getattr(logging, values), True)


def modify_config_for_print(config):
    "Turn config values into printable json strings, keeping the nesting."
    printable = {}
    for key, value in config.items():
        if not isinstance(value, dict):
            printable[key] = json.dumps(value)
        else:
            printable[key] = modify_config_for_print(value) or '{}'
    return printable


class ConfigHelpAction(argparse.Action):
    def __init__(self, option_strings, dest, help=None):
        super(ConfigHelpAction, self).__init__(
            option_strings, dest, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        from .prettyprint import pretty_print_dict, PrettyPrintConfig

        section = entrypoint_configurables[parser.prog].__name__
        printable = modify_config_for_print(build_config(parser.prog, True))
        pretty_print_dict({section: printable}, config=PrettyPrintConfig(out=sys.stderr))
        sys.exit(1)


def add_generic_args(parser):
    """Add --version, --config and --log-level, shared by every app."""
    parser.add_argument(
        '--version',
        action="version",
        version="%(prog)s " + __version__)
    parser.add_argument(
        '--config',
        action=ConfigHelpAction,
        help="print the config keys of this app with their effective values, and exit")
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=LOG_LEVELS,
        action=LogLevelAction,
        help="log level name, default INFO.")


def add_diff_args(parser):
    """Add the options controlling how trees are diffed."""
    parser.add_argument(
        '--atomic-path',
        dest='atomic_paths',
        action='append',
        metavar='PATH',
        help="path (like /Params/*/Curve) whose values are compared and "
             "replaced whole, never diffed field by field. May be repeated.")


filename_help = {
    "target": "baseline json tree.",
    "source": "modified json tree.",
    "base": "json tree to apply the patch to.",
    "patch": "diff file to apply, as written by bdiff --out.",
    "diff": "diff file, as written by bdiff --out.",
    }


def add_filename_args(parser, names):
    """Add one positional filename argument per name."""
    for name in names:
        parser.add_argument(name, help=filename_help[name])


def add_prettyprint_args(parser):
    """Add the options controlling terminal output."""
    parser.add_argument(
        '--no-color',
        dest='use_color',
        action="store_false",
        help="print plain text, without ANSI color escapes.")


def prettyprint_config_from_args(arguments, **kwargs):
    from .prettyprint import PrettyPrintConfig
    return PrettyPrintConfig(use_color=getattr(arguments, 'use_color', True), **kwargs)
