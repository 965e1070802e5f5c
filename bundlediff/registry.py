# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

"""Class and field descriptors for typed game objects.

The patcher resolves diff keys to typed field slots through a
TypeRegistry. A registry is normally built from a schema dump:

    {
        "app.Weapon": {
            "fields": [
                {"name": "Attack", "type": "S32"},
                {"name": "Tags", "type": "String", "array": true},
                {"name": "Stats", "type": "Object", "original_type": "app.Stats"}
            ]
        }
    }
"""

import copy
import io
import json
import struct
import uuid
from collections import namedtuple

from .diff_format import TYPE_KEY, get_type, unwrap_array
from .log import DiffFormatError


class UnknownTypeError(KeyError):
    pass


class FieldType:
    "Collection of valid values for the type of a field descriptor."
    OBJECT = "Object"
    STRUCT = "Struct"
    USERDATA = "UserData"
    STRING = "String"
    RESOURCE = "Resource"
    RUNTIME_TYPE = "RuntimeType"
    GUID = "Guid"
    BOOL = "Bool"
    S8 = "S8"
    S16 = "S16"
    S32 = "S32"
    S64 = "S64"
    U8 = "U8"
    U16 = "U16"
    U32 = "U32"
    U64 = "U64"
    F32 = "F32"
    F64 = "F64"
    # Anything else (vectors, colors, ...) is kept as its json value
    DATA = "Data"


OBJECT_TYPES = (FieldType.OBJECT, FieldType.STRUCT)
STRING_TYPES = (FieldType.STRING, FieldType.RESOURCE, FieldType.RUNTIME_TYPE)

# name: (bits, signed)
INTEGER_TYPES = {
    FieldType.S8: (8, True),
    FieldType.S16: (16, True),
    FieldType.S32: (32, True),
    FieldType.S64: (64, True),
    FieldType.U8: (8, False),
    FieldType.U16: (16, False),
    FieldType.U32: (32, False),
    FieldType.U64: (64, False),
}

FLOAT_TYPES = (FieldType.F32, FieldType.F64)


FieldDescriptor = namedtuple(
    'FieldDescriptor', ['name', 'type', 'array', 'original_type'])
FieldDescriptor.__new__.__defaults__ = (False, None)


UserDataRef = namedtuple('UserDataRef', ['class_name', 'path'])


class ClassDescriptor(object):
    """A named class and its ordered field slots."""

    def __init__(self, name, fields=()):
        self.name = name
        self.fields = list(fields)
        self._index = {f.name: i for i, f in enumerate(self.fields)}

    def index_of_field(self, name):
        return self._index.get(name, -1)

    def __repr__(self):
        return 'ClassDescriptor(%r, %d fields)' % (self.name, len(self.fields))


class Instance(object):
    """A live typed object: a class descriptor and one value per field slot."""

    def __init__(self, cls, values):
        assert len(values) == len(cls.fields), 'one value per field expected'
        self.cls = cls
        self.values = values

    @property
    def type_name(self):
        return self.cls.name

    def __getitem__(self, name):
        index = self.cls.index_of_field(name)
        if index == -1:
            raise KeyError(name)
        return self.values[index]

    def __setitem__(self, name, value):
        index = self.cls.index_of_field(name)
        if index == -1:
            raise KeyError(name)
        self.values[index] = value

    def copy_values_from(self, other):
        self.cls = other.cls
        self.values = list(other.values)

    def __eq__(self, other):
        if not isinstance(other, Instance):
            return NotImplemented
        return self.cls.name == other.cls.name and self.values == other.values

    def __repr__(self):
        fields = ", ".join(
            "%s=%r" % (f.name, v) for f, v in zip(self.cls.fields, self.values))
        return "<%s %s>" % (self.cls.name, fields)


class TypeRegistry(object):
    """Pre-populated lookup of class descriptors.

    Provides what patching needs from the outside world:
    field slot resolution, default instance construction and
    conversion of raw json values to field values.
    """

    def __init__(self, classes=()):
        self._classes = {}
        for cls in classes:
            self.add_class(cls)

    @classmethod
    def from_schema(cls, schema):
        classes = []
        for name, entry in schema.items():
            fields = [
                FieldDescriptor(
                    f["name"],
                    f.get("type", FieldType.DATA),
                    bool(f.get("array", False)),
                    f.get("original_type"))
                for f in entry.get("fields", [])
            ]
            classes.append(ClassDescriptor(name, fields))
        return cls(classes)

    @classmethod
    def load(cls, filename):
        with io.open(filename, encoding="utf8") as f:
            return cls.from_schema(json.load(f))

    def add_class(self, cls):
        self._classes[cls.name] = cls

    def get_class(self, name):
        return self._classes.get(name)

    def __contains__(self, name):
        return name in self._classes

    def resolve_field(self, class_name, field_name):
        "Return the descriptor of a field, or None if the class has no such field."
        cls = self.get_class(class_name)
        if cls is None:
            return None
        index = cls.index_of_field(field_name)
        return cls.fields[index] if index != -1 else None

    def create_instance(self, class_name):
        cls = self.get_class(class_name)
        if cls is None:
            raise UnknownTypeError("Invalid class %r" % (class_name,))
        return Instance(cls, [self.default_value(f) for f in cls.fields])

    def default_value(self, field):
        if field.array:
            return []
        ftype = field.type
        if ftype == FieldType.STRUCT:
            if field.original_type in self._classes:
                return self.create_instance(field.original_type)
            return None
        if ftype == FieldType.OBJECT:
            # Object references may be cyclic, they are created on demand
            return None
        if ftype in STRING_TYPES:
            return ""
        if ftype == FieldType.BOOL:
            return False
        if ftype in INTEGER_TYPES:
            return 0
        if ftype in FLOAT_TYPES:
            return 0.0
        if ftype == FieldType.GUID:
            return uuid.UUID(int=0)
        return None

    def convert(self, field_type, raw):
        """Convert a raw json value to the python value of a field type.

        Integers are range checked against the declared width.
        """
        if field_type == FieldType.BOOL:
            if not isinstance(raw, (bool, int)):
                raise DiffFormatError("Expected a bool, not %r" % (raw,))
            return bool(raw)
        if field_type in INTEGER_TYPES:
            bits, signed = INTEGER_TYPES[field_type]
            if isinstance(raw, bool) or not isinstance(raw, (int, float)):
                raise DiffFormatError("Expected an integer, not %r" % (raw,))
            value = int(raw)
            if value != raw:
                raise DiffFormatError("Expected an integer, not %r" % (raw,))
            if signed:
                low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
            else:
                low, high = 0, (1 << bits) - 1
            if not low <= value <= high:
                raise OverflowError("Value %d out of range for %s" % (value, field_type))
            return value
        if field_type == FieldType.F32:
            # Round to single precision
            return struct.unpack('<f', struct.pack('<f', float(raw)))[0]
        if field_type == FieldType.F64:
            return float(raw)
        if field_type in STRING_TYPES:
            return str(raw)
        if field_type == FieldType.GUID:
            return uuid.UUID(raw)
        return copy.deepcopy(raw)

    def deserialize(self, node, field_type, class_name=None):
        "Create a fresh field value from a json node."
        if field_type in OBJECT_TYPES:
            if node is None:
                return None
            return self.instance_from_json(node, class_name)
        if field_type == FieldType.USERDATA:
            return userdata_from_json(node)
        if node is None:
            return None
        return self.convert(field_type, node)

    def instance_from_json(self, node, class_name=None):
        if not isinstance(node, dict):
            raise DiffFormatError("Expected an object, not %r" % (node,))
        instance = self.create_instance(get_type(node) or class_name)
        for index, field in enumerate(instance.cls.fields):
            if field.name not in node:
                continue
            value = node[field.name]
            if field.array:
                items, _ = unwrap_array(value)
                instance.values[index] = [
                    self.deserialize(item, field.type, field.original_type)
                    for item in (items or [])
                ]
            else:
                new_value = self.deserialize(value, field.type, field.original_type)
                if new_value is not None or field.type in OBJECT_TYPES:
                    instance.values[index] = new_value
        return instance

    def instance_to_json(self, instance):
        node = {TYPE_KEY: instance.cls.name}
        for field, value in zip(instance.cls.fields, instance.values):
            if field.array:
                node[field.name] = [_value_to_json(self, v) for v in value]
            else:
                node[field.name] = _value_to_json(self, value)
        return node


def userdata_from_json(node):
    if isinstance(node, dict) and node.get("class") is not None and node.get("path") is not None:
        return UserDataRef(str(node["class"]), str(node["path"]))
    return None


def _value_to_json(registry, value):
    if isinstance(value, Instance):
        return registry.instance_to_json(value)
    if isinstance(value, UserDataRef):
        return {"class": value.class_name, "path": value.path}
    if isinstance(value, uuid.UUID):
        return str(value)
    return copy.deepcopy(value)
