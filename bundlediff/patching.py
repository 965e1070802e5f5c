# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import copy

from .diff_format import (
    DiffOp, TYPE_KEY, ACTION_KEY, ITEMS_KEY, INDEX_KEY, ITEM_KEY, ARRAY_KEY,
    read_action, is_removal, is_marker_list, get_type,
    is_array_envelope, unwrap_array,
)
from .log import DiffFormatError, debug, warning
from .registry import FieldType, OBJECT_TYPES, STRING_TYPES, userdata_from_json


__all__ = ["patch", "apply_object_diff", "apply_array_diff"]


def _marker_index(e):
    index = e.get(INDEX_KEY)
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        raise DiffFormatError("Invalid index in array diff marker {}.".format(e))
    return index


def _marker_item(e):
    if ITEM_KEY not in e:
        raise DiffFormatError("Missing item in array diff marker {}.".format(e))
    return e[ITEM_KEY]


def patch_list(obj, diff):
    """Produce a patched copy of a list.

    A list of markers is applied in order. Marker indices refer to
    positions in the unpatched list, so a running offset tracks the
    inserts and removals already done. Any other list replaces obj.
    """
    if not is_marker_list(diff):
        return copy.deepcopy(diff)

    newobj = copy.deepcopy(obj)
    offset = 0
    for e in diff:
        if not isinstance(e, dict):
            raise DiffFormatError("Array diff entry '{}' is not an object.".format(e))
        op = read_action(e)
        if op is None:
            # Untagged objects are new items
            newobj.append(copy.deepcopy(e))
        elif op == DiffOp.ADDED:
            newobj.append(copy.deepcopy(_marker_item(e)))
        elif op == DiffOp.CHANGED:
            index = offset + _marker_index(e)
            newobj[index] = patch(newobj[index], _marker_item(e))
        elif op == DiffOp.INSERTED:
            newobj.insert(offset + _marker_index(e), copy.deepcopy(_marker_item(e)))
            offset += 1
        elif op == DiffOp.REMOVED:
            del newobj[offset + _marker_index(e)]
            offset -= 1
        else:
            raise DiffFormatError("Invalid op {}.".format(e.get(ACTION_KEY)))

    return newobj


def patch_dict(obj, diff):
    new_cls = get_type(diff)
    if new_cls is not None and new_cls != get_type(obj):
        # Type changes are never merged field by field
        return copy.deepcopy(diff)

    newobj = {}
    for key, value in obj.items():
        if key not in diff:
            newobj[key] = copy.deepcopy(value)
        elif diff[key] is not None:
            newobj[key] = patch(value, diff[key])

    # Take new fields from diff
    for key, value in diff.items():
        if key not in obj and value is not None:
            newobj[key] = copy.deepcopy(value)

    return newobj


def patch(obj, diff):
    """Produce a patched version of obj with given hierarchical diff.

    A valid input object can be any dict or list of leaf values,
    or arbitrarily nested dict or list of valid input objects,
    as accepted by diff. The input object is not modified.
    """
    if diff is None:
        return copy.deepcopy(obj)

    if is_removal(diff):
        return None

    if isinstance(diff, list):
        items, _ = unwrap_array(obj)
        if items is None:
            if is_marker_list(diff):
                raise DiffFormatError(
                    "Cannot apply array diff to {}.".format(type(obj).__name__))
            return copy.deepcopy(diff)
        patched = patch_list(items, diff)
        if is_array_envelope(obj):
            newobj = {k: copy.deepcopy(v) for k, v in obj.items() if k != ITEMS_KEY}
            newobj[ITEMS_KEY] = patched
            return newobj
        return patched

    if isinstance(diff, dict) and isinstance(obj, dict):
        return patch_dict(obj, diff)

    return copy.deepcopy(diff)


def apply_object_diff(instance, diff, registry):
    """Apply an object diff to a typed instance.

    The instance is modified in place and returned, unless the diff
    changes its type. In that case a new default instance of the new
    type is patched and returned instead.

    Diff keys that are not fields of the class are skipped, so that
    diffs stay usable when fields get renamed or removed.
    """
    if diff is None:
        return instance
    if not isinstance(diff, dict):
        raise DiffFormatError("Object diff must be an object, not {!r}.".format(diff))

    new_cls = get_type(diff)
    if new_cls is not None and new_cls != instance.cls.name:
        instance = registry.create_instance(new_cls)

    cls = instance.cls
    for key, value in diff.items():
        index = cls.index_of_field(key)
        if index == -1:
            if key != TYPE_KEY:
                debug("Skipping unknown field %s of %s", key, cls.name)
            continue

        field = cls.fields[index]
        current = instance.values[index]
        if field.array:
            instance.values[index] = apply_array_diff(
                current, value, field.type, field.original_type, registry)
        elif field.type in OBJECT_TYPES:
            if value is None:
                instance.values[index] = registry.default_value(field)
            else:
                instance.values[index] = _create_or_apply(
                    current, value, field.original_type, registry)
        elif field.type in STRING_TYPES:
            if value is not None:
                instance.values[index] = str(value)
            elif current is None:
                instance.values[index] = ""
        elif field.type == FieldType.USERDATA:
            if value is None:
                continue
            ref = userdata_from_json(value)
            if ref is None:
                warning("Unsupported userdata field %s in %s, ignoring.", field.name, cls.name)
                continue
            instance.values[index] = ref
        elif value is None:
            instance.values[index] = registry.default_value(field)
        elif field.type == FieldType.DATA:
            # Plain json values take nested diffs too
            instance.values[index] = patch(current, value)
        else:
            instance.values[index] = registry.convert(field.type, value)

    return instance


def _create_or_apply(instance, diff, class_name, registry):
    if instance is None:
        instance = registry.create_instance(get_type(diff) or class_name)
    return apply_object_diff(instance, diff, registry)


def apply_array_diff(values, diff, field_type, element_type, registry):
    """Apply an array diff to a list of field values.

    The list is modified in place when one is given, and returned.
    A None diff clears the field. An exception raised halfway leaves
    the list partially patched.
    """
    if diff is None:
        return []

    items = values if values is not None else []

    if isinstance(diff, dict):
        if ARRAY_KEY not in diff:
            raise DiffFormatError(
                "Array diff must be a list or an array envelope, not {!r}.".format(diff))
        diff = diff.get(ITEMS_KEY)
        if diff is None:
            return items

    if not isinstance(diff, list):
        raise DiffFormatError("Array diff must be a list, not {!r}.".format(diff))

    if not is_marker_list(diff):
        # Fully serialized array, recreate the items
        del items[:]
        items.extend(registry.deserialize(item, field_type, element_type) for item in diff)
        return items

    offset = 0
    for e in diff:
        if not isinstance(e, dict):
            raise DiffFormatError("Array element diffs must be objects, not {!r}.".format(e))
        op = read_action(e)
        if op is None:
            # No action, the item was not in the base array at all
            items.append(registry.deserialize(e, field_type, element_type))
        elif op == DiffOp.ADDED:
            items.append(registry.deserialize(_marker_item(e), field_type, element_type))
        elif op == DiffOp.CHANGED:
            index = offset + _marker_index(e)
            item = _marker_item(e)
            if is_removal(item):
                items[index] = None
            elif field_type in OBJECT_TYPES:
                items[index] = _create_or_apply(items[index], item, element_type, registry)
            elif field_type == FieldType.DATA:
                items[index] = patch(items[index], item)
            else:
                items[index] = registry.deserialize(item, field_type, element_type)
        elif op == DiffOp.INSERTED:
            index = offset + _marker_index(e)
            items.insert(index, registry.deserialize(_marker_item(e), field_type, element_type))
            offset += 1
        elif op == DiffOp.REMOVED:
            del items[offset + _marker_index(e)]
            offset -= 1
        else:
            raise DiffFormatError("Invalid op {}.".format(e.get(ACTION_KEY)))

    return items
