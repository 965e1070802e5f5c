# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

from .log import DiffFormatError


# Reserved keys of the wire format
TYPE_KEY = "$type"
ACTION_KEY = "$t"
INDEX_KEY = "$index"
ITEM_KEY = "$item"
ARRAY_KEY = "$array"
ITEMS_KEY = "items"


class DiffOp:
    "Collection of valid values for the action tag of array diff markers."
    ADDED = "a"
    CHANGED = "c"
    INSERTED = "i"
    REMOVED = "r"


OP_NAMES = {
    DiffOp.ADDED: "Added",
    DiffOp.CHANGED: "Changed",
    DiffOp.INSERTED: "Inserted",
    DiffOp.REMOVED: "Removed",
}


def op_removal():
    "Create a marker removing the value it replaces."
    return {ACTION_KEY: DiffOp.REMOVED}

def op_added(item):
    "Create an array marker appending item."
    return {ACTION_KEY: DiffOp.ADDED, ITEM_KEY: item}

def op_inserted(index, item):
    "Create an array marker inserting item before index."
    return {ACTION_KEY: DiffOp.INSERTED, INDEX_KEY: index, ITEM_KEY: item}

def op_removed(index):
    "Create an array marker removing the item at index."
    return {ACTION_KEY: DiffOp.REMOVED, INDEX_KEY: index}

def op_changed(index, diff):
    "Create an array marker patching the item at index with diff."
    assert diff is not None, "Changed marker needs a diff"
    return {ACTION_KEY: DiffOp.CHANGED, INDEX_KEY: index, ITEM_KEY: diff}


def read_action(obj):
    """Return the action tag of a marker object, or None if it has none."""
    if not isinstance(obj, dict):
        return None
    tag = obj.get(ACTION_KEY)
    if not tag or not isinstance(tag, str):
        return None
    return tag[0]


def is_removal(diff):
    "Whether diff is the bare removal marker (no index)."
    return (isinstance(diff, dict) and read_action(diff) == DiffOp.REMOVED
            and INDEX_KEY not in diff)


def is_marker_list(diff):
    """Whether diff is an array diff made of markers.

    Only the first item is checked: if it is not a marker,
    none of them are and the list is a full replacement.
    """
    return (isinstance(diff, list) and len(diff) > 0
            and read_action(diff[0]) is not None)


def get_type(obj):
    "Return the $type tag of an object node, if any."
    if isinstance(obj, dict):
        value = obj.get(TYPE_KEY)
        if isinstance(value, str):
            return value
    return None


def is_array_envelope(obj):
    return isinstance(obj, dict) and ARRAY_KEY in obj and ITEMS_KEY in obj


def unwrap_array(obj):
    """Return (items, element type) of a bare array or an $array envelope.

    Returns (None, None) for anything else.
    """
    if isinstance(obj, list):
        return obj, None
    if is_array_envelope(obj):
        items = obj[ITEMS_KEY]
        if items is None:
            items = []
        return items, obj[ARRAY_KEY]
    return None, None


class ArrayDiffBuilder(object):

    # Structural ops, which must come after all changes
    STRUCTURAL_OPS = (
        DiffOp.ADDED,
        DiffOp.INSERTED,
        DiffOp.REMOVED,
        )

    def __init__(self):
        self._diff = []
        self._structural = False

    def validated(self):
        return self._diff or None

    def append(self, entry):
        # Simplifies some algorithms
        if entry is None:
            return

        # Typechecking (just for internal consistency checking)
        op = read_action(entry)
        assert op in OP_NAMES
        if op in ArrayDiffBuilder.STRUCTURAL_OPS:
            self._structural = True
        else:
            # Indices of changes are only unambiguous before any add/remove
            assert not self._structural, "Changed marker after structural marker"
        self._diff.append(entry)

    def changed(self, index, diff):
        if diff is not None:
            self.append(op_changed(index, diff))

    def added(self, item):
        self.append(op_added(item))

    def inserted(self, index, item):
        self.append(op_inserted(index, item))

    def removed(self, index):
        self.append(op_removed(index))


class ObjectDiffBuilder(object):

    def __init__(self):
        self._diff = {}

    def validated(self):
        return self._diff or None

    def _set(self, key, value):
        assert isinstance(key, str), 'field name must be a string'
        assert key not in self._diff, 'multiple diff entries for field %r' % key
        self._diff[key] = value

    def add(self, key, value):
        self._set(key, value)

    def delete(self, key):
        self._set(key, None)

    def patch(self, key, diff):
        if diff is not None:
            self._set(key, diff)


def is_valid_diff(diff, deep=False):
    """Checks whether a diff node is well formed.

    Returns a boolean indicating the well-formedness of the diff.
    """
    try:
        validate_diff(diff, deep=deep)
        result = True
    except DiffFormatError:
        result = False
    return result


def validate_diff(diff, deep=False):
    """Check whether a diff node is well formed.

    Plain values are always valid (they are full replacements),
    marker lists and marker objects are checked.

    Raises a DiffFormatError if not well formed.
    """
    if isinstance(diff, list):
        if is_marker_list(diff):
            for e in diff:
                validate_marker(e, deep=deep)
    elif isinstance(diff, dict):
        if ACTION_KEY in diff:
            if not is_removal(diff):
                raise DiffFormatError(
                    "Marker '{}' is only valid inside an array diff.".format(diff))
        elif deep:
            for value in diff.values():
                validate_diff(value, deep=deep)


def validate_marker(e, deep=False):
    """Check that e is a well formed array diff marker.

    Raises a DiffFormatError if not well formed.
    """
    if not isinstance(e, dict):
        raise DiffFormatError("Array diff entry '{}' is not an object.".format(e))

    op = read_action(e)
    if op is None:
        # Untagged objects are items to append
        return
    if op not in OP_NAMES:
        raise DiffFormatError("Unknown diff op '{}'.".format(e[ACTION_KEY]))

    if op in (DiffOp.CHANGED, DiffOp.INSERTED, DiffOp.REMOVED):
        index = e.get(INDEX_KEY)
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise DiffFormatError(
                "{} marker expects a non-negative integer index, not '{}'.".format(
                    OP_NAMES[op], index))
    if op != DiffOp.REMOVED and ITEM_KEY not in e:
        raise DiffFormatError("{} marker is missing its item.".format(OP_NAMES[op]))
    if op == DiffOp.CHANGED and deep:
        # e[$item] is itself a diff, check it recursively if the "deep" argument is true
        validate_diff(e[ITEM_KEY], deep=deep)
