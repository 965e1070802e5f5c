# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import copy
import json
import os

from bundlediff import patch, diff
from bundlediff.diff_format import is_valid_diff


def item(value, cls="app.Effect", **fields):
    "Make a small typed object for array tests."
    obj = {"$type": cls, "Kind": "k", "Value": value}
    obj.update(fields)
    return obj


def check_diff_and_patch(a, b):
    "Check that patch(a, diff(a,b)) reproduces b, and leaves a alone."
    before = copy.deepcopy(a)
    d = diff(a, b)
    assert is_valid_diff(d, deep=True)
    assert patch(a, d) == b
    assert a == before
    return d


def check_symmetric_diff_and_patch(a, b):
    """Check that patch(a, diff(a,b)) reproduces b and vice versa.

    Only valid when both sides have the same fields, since
    fields missing from the source are never deleted.
    """
    check_diff_and_patch(a, b)
    check_diff_and_patch(b, a)


def write_json_file(dirname, name, obj):
    fn = os.path.join(str(dirname), name)
    with open(fn, 'w') as f:
        json.dump(obj, f)
    return fn


def read_json_file(fn):
    with open(fn) as f:
        return json.load(f)
