# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import copy

from ..diff_format import (
    ObjectDiffBuilder, ArrayDiffBuilder, op_removal, get_type, unwrap_array,
)
from ..log import debug

from .config import DiffConfig

__all__ = ["diff", "diff_objects", "diff_arrays"]


def _kind(value):
    "Classify a json-like value. Bools are not numbers here."
    if isinstance(value, dict):
        return "object"
    elif isinstance(value, list):
        return "array"
    elif isinstance(value, bool):
        return "bool"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    raise TypeError("Can only diff json-like values, not {}.".format(
        type(value).__name__))


def diff(target, source, path="", config=None):
    """Compute the minimal diff turning target into source.

    Both arguments are json-like trees (dicts, lists, strings,
    numbers, bools and None). Returns None if nothing changed.
    """
    if config is None:
        config = DiffConfig()

    if target is None:
        return None if source is None else copy.deepcopy(source)

    if source is None:
        return op_removal()

    kind = _kind(target)
    if kind != _kind(source):
        # No structural merge across kinds
        return copy.deepcopy(source)

    if config.is_atomic(path):
        if target == source:
            return None
        return _whole_replacement(target, source)

    if kind == "object":
        target_items, target_cls = unwrap_array(target)
        source_items, source_cls = unwrap_array(source)
        if target_items is not None and source_items is not None:
            return diff_arrays(target_items, source_items, path=path, config=config,
                               classname=source_cls or target_cls)
        return diff_objects(target, source, path=path, config=config)

    if kind == "array":
        return diff_arrays(target, source, path=path, config=config)

    return None if target == source else copy.deepcopy(source)


def diff_objects(target, source, path="", config=None):
    """Compute the field diff of two objects.

    Only fields of source are visited: a field missing from source
    is left alone, while a field explicitly set to None in source is
    recorded as None, which deletes it when patching.

    A type tag on source that differs from the one on target
    makes the diff a full copy of source.
    """
    if config is None:
        config = DiffConfig()

    if not isinstance(target, dict) or not isinstance(source, dict):
        raise TypeError('Arguments to diff_objects need to be dicts, got %r and %r' % (
            target, source))

    source_cls = get_type(source)
    if source_cls is not None and get_type(target) != source_cls:
        return copy.deepcopy(source)

    di = ObjectDiffBuilder()
    for key, svalue in source.items():
        tvalue = target.get(key)
        if tvalue is None:
            if svalue is not None:
                di.add(key, copy.deepcopy(svalue))
        elif svalue is None:
            di.delete(key)
        else:
            subpath = "/".join((path, key))
            di.patch(key, diff(tvalue, svalue, path=subpath, config=config))
    return di.validated()


def _whole_replacement(target, source):
    """Copy source, with None for every field only target has.

    Patching target with the result gives source even though
    objects are patched field by field.
    """
    replacement = copy.deepcopy(source)
    if not (isinstance(target, dict) and isinstance(source, dict)):
        return replacement
    source_cls = get_type(source)
    if source_cls is not None and source_cls != get_type(target):
        # Already a full substitution when patching
        return replacement
    for key, tvalue in target.items():
        if key not in source:
            replacement[key] = None
        elif source[key] is not None:
            replacement[key] = _whole_replacement(tvalue, source[key])
    return replacement


def _is_object_array(items):
    return not items or isinstance(items[0], dict)


def diff_arrays(target, source, path="", config=None, classname=None):
    """Compute the positional diff of two arrays.

    Arrays of primitives are replaced as a whole when they differ.
    Arrays of objects are matched from the front (head) and the
    back (tail), and the differing middle is recorded as changes of
    the overlapping items followed by removals or additions.
    All marker indices refer to positions in target.
    """
    if config is None:
        config = DiffConfig()

    if not target:
        return copy.deepcopy(source) if source else None

    subpath = "/".join((path, "*"))

    if not (_is_object_array(target) and _is_object_array(source)):
        # Primitives have no identity to key edits against
        if len(source) != len(target):
            return copy.deepcopy(source)
        for tvalue, svalue in zip(target, source):
            if diff(tvalue, svalue, path=subpath, config=config) is not None:
                return copy.deepcopy(source)
        return None

    if classname is None:
        classname = (source and get_type(source[0])) or get_type(target[0])
    debug("Diffing array of %s at %s by position", classname or "objects", path or "/")

    ntarget = len(target)
    nsource = len(source)

    def same(i, j):
        return diff(target[i], source[j], path=subpath, config=config) is None

    # Equal runs at both ends, never overlapping on either side
    head = 0
    while head < ntarget and head < nsource and same(head, head):
        head += 1
    tail = 0
    while (tail < ntarget - head and tail < nsource - head and
           same(ntarget - tail - 1, nsource - tail - 1)):
        tail += 1

    target_end = ntarget - tail
    source_end = nsource - tail

    di = ArrayDiffBuilder()

    if head + tail == nsource:
        # All of source is found in target, the rest of target goes
        for i in range(head, target_end):
            di.removed(i)
        return di.validated()

    if head + tail == ntarget:
        # All of target is found in source, the rest of source is new
        _add_items(di, source, head, source_end, tail, target_end)
        return di.validated()

    # Everything else is edits plus adds or removes. Moved items are
    # not detected. Changes go first so their indices stay valid.
    overlap_end = min(target_end, source_end)
    for i in range(head, overlap_end):
        di.changed(i, diff(target[i], source[i], path=subpath, config=config))

    if target_end > source_end:
        for i in range(overlap_end, target_end):
            di.removed(i)
    elif source_end > target_end:
        _add_items(di, source, overlap_end, source_end, tail, target_end)

    return di.validated()


def _add_items(di, source, begin, end, tail, insert_at):
    for i in range(begin, end):
        item = copy.deepcopy(source[i])
        if tail == 0:
            di.added(item)
        else:
            # Each insert shifts the next one, see patch_list
            di.inserted(insert_at, item)
