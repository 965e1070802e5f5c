# -*- coding: utf-8 -*-

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

from collections import namedtuple
import datetime
import json
import os
import sys

import colorama

from .diff_format import (
    DiffOp, OP_NAMES, ACTION_KEY, INDEX_KEY, ITEM_KEY, TYPE_KEY, ARRAY_KEY, ITEMS_KEY,
    read_action, is_removal, is_marker_list, get_type, unwrap_array,
)
from .log import DiffFormatError


# Indentation step of nested values
IND = "  "

# Lists whose json fits in this width are printed on one line
MAXWIDTH = 78

DIFF_ENTRY_END = '\n'

# Base value placeholder when the diffed tree is not known
Missing = object()

LinePrefixes = namedtuple('LinePrefixes', ('KEEP', 'REMOVE', 'ADD', 'INFO', 'RESET'))

_plain = LinePrefixes(KEEP='   ', REMOVE='-  ', ADD='+  ', INFO='## ', RESET='')

_colored = LinePrefixes(
    KEEP=_plain.KEEP,
    REMOVE=colorama.Fore.RED + _plain.REMOVE,
    ADD=colorama.Fore.GREEN + _plain.ADD,
    INFO=colorama.Fore.BLUE + colorama.Style.BRIGHT + _plain.INFO,
    RESET=colorama.Style.RESET_ALL,
)


class PrettyPrintConfig:
    """Where to write, and whether to use color escapes."""

    def __init__(self, out=sys.stdout, use_color=True):
        self.out = out
        self.use_color = use_color

    @property
    def prefixes(self):
        return _colored if self.use_color else _plain

    KEEP = property(lambda self: self.prefixes.KEEP)
    REMOVE = property(lambda self: self.prefixes.REMOVE)
    ADD = property(lambda self: self.prefixes.ADD)
    INFO = property(lambda self: self.prefixes.INFO)
    RESET = property(lambda self: self.prefixes.RESET)

DefaultConfig = PrettyPrintConfig()


class PrintWriter:
    "Output stream going through print(), so that redirected stdout is honored."

    def write(self, text):
        print(text, end="")


def format_value(v):
    "Strings as they are, anything else as json."
    return v if isinstance(v, str) else json.dumps(v)


def diff_tree(diff):
    """Render a diff as depth-first `path: value` lines for debugging.

        ._Param.0 -> Changed
        ._Param.0._Attack: 100
        ._Param.0._Defense: 49
        ._Param.* -> Added
        ._Param.*._Skill: 1

    Array items use their marker index, or * for appended items.
    """
    lines = []
    _diff_tree_lines(diff, "", lines)
    return "".join(lines)


def _diff_tree_lines(diff, line, lines):
    if diff is None:
        lines.append("%s: null\n" % line)
    elif isinstance(diff, dict):
        if ARRAY_KEY in diff:
            _diff_tree_lines(diff.get(ITEMS_KEY), line, lines)
            return
        for key, value in diff.items():
            if key == ACTION_KEY:
                name = OP_NAMES.get(read_action(diff), value)
                lines.append("%s -> %s\n" % (line, name))
            elif key == INDEX_KEY:
                continue
            elif key == TYPE_KEY:
                lines.append("%s <%s>\n" % (line, value))
            else:
                _diff_tree_lines(value, "%s.%s" % (line, key), lines)
    elif isinstance(diff, list):
        for i, item in enumerate(diff):
            op = read_action(item)
            if op is None:
                _diff_tree_lines(item, "%s.%d" % (line, i), lines)
                continue
            if INDEX_KEY in item:
                subline = "%s.%s" % (line, item[INDEX_KEY])
            elif op == DiffOp.ADDED:
                subline = "%s.*" % line
            else:
                subline = "%s.%d" % (line, i)
            lines.append("%s -> %s\n" % (subline, OP_NAMES.get(op, item[ACTION_KEY])))
            if ITEM_KEY in item:
                _diff_tree_lines(item[ITEM_KEY], subline, lines)
    else:
        lines.append("%s: %s\n" % (line, format_value(diff)))


def file_timestamp(filename):
    "Modification time of a file for diff headers."
    if not os.path.exists(filename):
        return "(no timestamp)"
    mtime = datetime.datetime.fromtimestamp(os.path.getmtime(filename))
    return mtime.isoformat(" ")


def pretty_print_value(value, prefix="", config=DefaultConfig):
    """Write a value, every line starting with prefix."""
    if isinstance(value, dict):
        pretty_print_dict(value, (), prefix, config)
    elif isinstance(value, list) and value:
        pretty_print_list(value, prefix, config)
    else:
        pretty_print_multiline(format_value(value), prefix, config)


def pretty_print_key(k, prefix, config):
    config.out.write("%s%s:\n" % (prefix, k))


def pretty_print_key_value(k, v, prefix, config):
    config.out.write("%s%s: %s\n" % (prefix, k, v))


def pretty_print_diff_action(msg, path, config):
    config.out.write("%s%s %s:%s\n" % (config.INFO, msg, path or "/", config.RESET))


def pretty_print_item(k, v, prefix="", config=DefaultConfig):
    "Write `k: v` on one line, or k followed by v indented below it."
    if isinstance(v, dict):
        pretty_print_key(k, prefix, config)
        pretty_print_dict(v, (), prefix + IND, config)
        return
    if isinstance(v, list) and v:
        pretty_print_key(k, prefix, config)
        pretty_print_list(v, prefix + IND, config)
        return
    text = format_value(v)
    if "\n" not in text:
        pretty_print_key_value(k, text, prefix, config)
        return
    pretty_print_key(k, prefix, config)
    for line in text.splitlines():
        config.out.write("%s%s\n" % (prefix + IND, line))


def pretty_print_multiline(text, prefix="", config=DefaultConfig):
    assert isinstance(text, str), 'expected string argument'
    for line in text.splitlines(True):
        config.out.write(prefix + line)
    # Always end on a fresh line
    if not text.endswith("\n"):
        config.out.write("\n")


def pretty_print_list(li, prefix="", config=DefaultConfig):
    inline = json.dumps(li)
    if len(inline) + len(prefix) < MAXWIDTH and "\\n" not in inline:
        config.out.write("%s%s\n" % (prefix, inline))
        return
    for i, v in enumerate(li):
        pretty_print_item("item[%d]" % i, v, prefix, config)


def pretty_print_dict(d, exclude_keys=(), prefix="", config=DefaultConfig):
    """Write the items of a dict as `key: value` lines.

    The type tag goes first, the other keys sorted.
    """
    keys = sorted((k for k in d if k not in exclude_keys),
                  key=lambda k: (k != TYPE_KEY, k))
    for k in keys:
        pretty_print_item(k, d[k], prefix, config)


def _base_at(base, key):
    if base is Missing:
        return Missing
    if isinstance(key, int):
        items, _ = unwrap_array(base)
        if items is not None and 0 <= key < len(items):
            return items[key]
        return Missing
    if isinstance(base, dict) and key in base:
        return base[key]
    return Missing


def pretty_print_replacement(base, value, path, config):
    if base is Missing or base is None:
        pretty_print_diff_action("replaced", path, config)
    else:
        btype = get_type(base)
        vtype = get_type(value)
        if btype is not None and vtype is not None and btype != vtype:
            typechange = " (type changed from %s to %s)" % (btype, vtype)
        elif type(base) is not type(value):
            typechange = " (type changed from %s to %s)" % (
                base.__class__.__name__, value.__class__.__name__)
        else:
            typechange = ""
        pretty_print_diff_action("replaced" + typechange, path, config)
        pretty_print_value(base, config.REMOVE, config)
    pretty_print_value(value, config.ADD, config)
    config.out.write(DIFF_ENTRY_END + config.RESET)


def pretty_print_marker(base, e, path, config=DefaultConfig):
    op = read_action(e)
    if op is None:
        # Untagged item appended
        pretty_print_diff_action("added", path + "/*", config)
        pretty_print_value(e, config.ADD, config)
    elif op == DiffOp.ADDED:
        pretty_print_diff_action("added", path + "/*", config)
        pretty_print_value(e[ITEM_KEY], config.ADD, config)
    elif op == DiffOp.INSERTED:
        pretty_print_diff_action("inserted before", "%s/%d" % (path, e[INDEX_KEY]), config)
        pretty_print_value(e[ITEM_KEY], config.ADD, config)
    elif op == DiffOp.REMOVED:
        nextpath = "%s/%d" % (path, e[INDEX_KEY])
        pretty_print_diff_action("deleted", nextpath, config)
        old = _base_at(base, e[INDEX_KEY])
        if old is not Missing:
            pretty_print_value(old, config.REMOVE, config)
    elif op == DiffOp.CHANGED:
        nextpath = "%s/%d" % (path, e[INDEX_KEY])
        pretty_print_diff(_base_at(base, e[INDEX_KEY]), e[ITEM_KEY], nextpath, config)
        return
    else:
        raise DiffFormatError("Unknown array diff op {}".format(e.get(ACTION_KEY)))

    config.out.write(DIFF_ENTRY_END + config.RESET)


def pretty_print_object_diff(base, di, path, config=DefaultConfig):
    for key, value in di.items():
        nextpath = "/".join((path, key))
        old = _base_at(base, key)
        if value is None:
            pretty_print_diff_action("deleted", nextpath, config)
            if old is not Missing:
                pretty_print_value(old, config.REMOVE, config)
            config.out.write(DIFF_ENTRY_END + config.RESET)
        elif old is Missing and base is not Missing:
            pretty_print_diff_action("added", nextpath, config)
            pretty_print_value(value, config.ADD, config)
            config.out.write(DIFF_ENTRY_END + config.RESET)
        else:
            pretty_print_diff(old, value, nextpath, config)


def pretty_print_diff(base, di, path="", config=DefaultConfig):
    """Pretty-print a bundlediff diff.

    base is the value the diff applies to, or Missing when
    unknown, in which case removed values are not shown.
    """
    if di is None:
        return
    if is_removal(di):
        pretty_print_diff_action("deleted", path, config)
        if base is not Missing:
            pretty_print_value(base, config.REMOVE, config)
        config.out.write(DIFF_ENTRY_END + config.RESET)
    elif is_marker_list(di):
        for e in di:
            pretty_print_marker(base, e, path, config)
    elif isinstance(di, dict) and (base is Missing or isinstance(base, dict)):
        new_cls = get_type(di)
        if new_cls is not None and base is not Missing and new_cls != get_type(base):
            pretty_print_replacement(base, di, path, config)
        else:
            pretty_print_object_diff(base, di, path, config)
    else:
        pretty_print_replacement(base, di, path, config)


resource_diff_header = """\
bdiff {afn} {bfn}
--- {afn}{atime}
+++ {bfn}{btime}
"""

def pretty_print_resource_diff(afn, bfn, a, di, config=DefaultConfig):
    """Pretty-print a resource diff

    Parameters
    ----------

    afn: str
        Filename of a, the target tree
    bfn: str
        Filename of b, the source tree
    a: dict
        The target tree
    di: diff
        The diff describing the transformation from a to b
    config: PrettyPrintConfig
        Config object determining where and how things get printed
    """
    if di is not None:
        atime = "  " + file_timestamp(afn)
        btime = "  " + file_timestamp(bfn)
        config.out.write(resource_diff_header.format(
            afn=afn, bfn=bfn, atime=atime, btime=btime))
        pretty_print_diff(a, di, "", config)
