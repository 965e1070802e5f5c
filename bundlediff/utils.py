# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import io
import json
import os
import sys

import colorama

# Passing this filename stands for a tree that does not exist
EXPLICIT_MISSING_FILE = 'nul' if os.name == 'nt' else '/dev/null'

_null_results = {
    'null': lambda: None,
    'empty': dict,
}


def read_json(f, on_null='null'):
    """Load a json tree from a filename or an open file.

    The explicit missing filename (/dev/null, or nul on Windows)
    gives None, or an empty dict when on_null is "empty".
    """
    if f == EXPLICIT_MISSING_FILE:
        if on_null not in _null_results:
            raise ValueError('on_null must be one of %s, not %r' % (
                ', '.join(sorted(_null_results)), on_null))
        return _null_results[on_null]()
    if not isinstance(f, str):
        return json.load(f)
    with io.open(f, encoding='utf-8') as fo:
        return json.load(fo)


def write_json(obj, f):
    "Write a json tree, indented, to a filename or an open file."
    if not isinstance(f, str):
        json.dump(obj, f, indent=2, separators=(",", ": "))
        return
    with io.open(f, 'w', encoding='utf-8') as fo:
        json.dump(obj, fo, indent=2, separators=(",", ": "))


def split_path(path):
    "'/Params/0/Curve' -> ['Params', '0', 'Curve']"
    return [part for part in path.split("/") if part]


def join_path(*parts):
    "['Params', 0, 'Curve'] -> '/Params/0/Curve'"
    if len(parts) == 1 and isinstance(parts[0], (list, tuple)):
        parts = parts[0]
    return "/" + "/".join(str(p) for p in parts if p not in ("", "/"))


def _is_index(part):
    if isinstance(part, int):
        return True
    return part.lstrip("+-").isdigit()


def star_path(parts):
    "Join path parts, with array indices replaced by *."
    return join_path(["*" if _is_index(p) else p for p in parts])


def setup_std_streams():
    """Prepare stdout/err for the command line apps.

    Windows consoles need colorama to show ANSI color escapes.
    """
    if sys.platform.startswith('win'):
        colorama.just_fix_windows_console()
