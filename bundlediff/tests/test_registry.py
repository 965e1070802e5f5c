# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import uuid

import pytest

from bundlediff.log import DiffFormatError
from bundlediff.registry import (
    TypeRegistry, ClassDescriptor, FieldDescriptor, FieldType, Instance,
    UnknownTypeError, UserDataRef,
)


def test_registry_from_schema(registry):
    assert "app.Weapon" in registry
    assert "app.Missing" not in registry
    cls = registry.get_class("app.Weapon")
    assert cls.name == "app.Weapon"
    assert cls.index_of_field("Name") == 0
    assert cls.index_of_field("Nope") == -1

    field = registry.resolve_field("app.Weapon", "Effects")
    assert field == FieldDescriptor("Effects", FieldType.OBJECT, True, "app.Effect")
    assert registry.resolve_field("app.Weapon", "Nope") is None
    assert registry.resolve_field("app.Missing", "Name") is None


def test_registry_load(schemafile):
    registry = TypeRegistry.load(schemafile)
    assert registry.get_class("app.Stats").fields == [
        FieldDescriptor("Power", FieldType.S32),
        FieldDescriptor("Range", FieldType.F64),
    ]


def test_registry_manual_classes():
    registry = TypeRegistry([
        ClassDescriptor("app.Point", [
            FieldDescriptor("X", FieldType.F32),
            FieldDescriptor("Y", FieldType.F32),
        ]),
    ])
    point = registry.create_instance("app.Point")
    assert point.values == [0.0, 0.0]


def test_create_instance_defaults(registry):
    weapon = registry.create_instance("app.Weapon")
    assert weapon.type_name == "app.Weapon"
    assert weapon["Name"] == ""
    assert weapon["Attack"] == 0
    assert weapon["Weight"] == 0.0
    assert weapon["Enabled"] is False
    assert weapon["Id"] == uuid.UUID(int=0)
    assert weapon["Tags"] == []
    assert weapon["Effects"] == []
    # Structs are built, object references are not
    assert weapon["Stats"] == registry.create_instance("app.Stats")
    assert weapon["Upgrade"] is None
    assert weapon["Icon"] is None
    assert weapon["Color"] is None


def test_create_instance_unknown_type(registry):
    with pytest.raises(UnknownTypeError):
        registry.create_instance("app.Missing")
    with pytest.raises(KeyError):
        registry.create_instance(None)


def test_instance_item_access(registry):
    weapon = registry.create_instance("app.Weapon")
    weapon["Attack"] = 7
    assert weapon["Attack"] == 7
    assert weapon.values[1] == 7
    with pytest.raises(KeyError):
        weapon["Nope"]
    with pytest.raises(KeyError):
        weapon["Nope"] = 1


def test_instance_equality(registry):
    one = registry.create_instance("app.Effect")
    other = registry.create_instance("app.Effect")
    assert one == other
    other["Value"] = 2
    assert one != other
    assert one != registry.create_instance("app.PoisonEffect")
    assert "app.Effect" in repr(one)


def test_convert_integers(registry):
    assert registry.convert(FieldType.S8, -128) == -128
    assert registry.convert(FieldType.S8, 127) == 127
    assert registry.convert(FieldType.U8, 255) == 255
    assert registry.convert(FieldType.U64, (1 << 64) - 1) == (1 << 64) - 1
    assert registry.convert(FieldType.S32, 3.0) == 3
    for ftype, value in [
            (FieldType.S8, 128),
            (FieldType.S8, -129),
            (FieldType.U8, 256),
            (FieldType.U16, -1),
            (FieldType.S64, 1 << 63),
            (FieldType.U64, 1 << 64),
            ]:
        with pytest.raises(OverflowError):
            registry.convert(ftype, value)
    for value in [1.5, "1", True, None]:
        with pytest.raises(DiffFormatError):
            registry.convert(FieldType.S32, value)


def test_convert_other_primitives(registry):
    assert registry.convert(FieldType.BOOL, True) is True
    assert registry.convert(FieldType.BOOL, 0) is False
    with pytest.raises(DiffFormatError):
        registry.convert(FieldType.BOOL, "yes")

    # Single precision rounding
    value = registry.convert(FieldType.F32, 0.1)
    assert value != 0.1
    assert abs(value - 0.1) < 1e-7
    assert registry.convert(FieldType.F32, 1.5) == 1.5
    assert registry.convert(FieldType.F64, 0.1) == 0.1

    assert registry.convert(FieldType.STRING, "abc") == "abc"
    assert registry.convert(FieldType.RESOURCE, "a/b.user") == "a/b.user"
    guid = "4b5e9c1e-8f3a-4d2b-9f6a-0c1d2e3f4a5b"
    assert registry.convert(FieldType.GUID, guid) == uuid.UUID(guid)
    data = {"r": 1, "g": [0.5]}
    converted = registry.convert(FieldType.DATA, data)
    assert converted == data
    assert converted is not data


def test_instance_json_roundtrip(registry):
    node = {
        "$type": "app.Weapon",
        "Name": "Sword",
        "Attack": 10,
        "Weight": 2.5,
        "Level": 3,
        "Enabled": True,
        "Id": "4b5e9c1e-8f3a-4d2b-9f6a-0c1d2e3f4a5b",
        "Tags": ["sharp", "heavy"],
        "Drops": [1, 2],
        "Stats": {"$type": "app.Stats", "Power": 4, "Range": 1.25},
        "Effects": [
            {"$type": "app.Effect", "Kind": "fire", "Value": 3},
            {"$type": "app.PoisonEffect", "Kind": "poison", "Value": 1, "Duration": 4.0},
        ],
        "Upgrade": None,
        "Icon": {"class": "app.IconData", "path": "ui/sword.user"},
        "Color": [1, 0, 0, 1],
    }
    instance = registry.instance_from_json(node)
    assert instance["Icon"] == UserDataRef("app.IconData", "ui/sword.user")
    assert instance["Effects"][1].type_name == "app.PoisonEffect"
    assert registry.instance_to_json(instance) == node


def test_instance_from_json_defaults(registry):
    # Missing fields keep their defaults, class comes from the caller
    instance = registry.instance_from_json({"Name": "Axe", "Bogus": 1}, "app.Weapon")
    assert instance["Name"] == "Axe"
    assert instance["Attack"] == 0
    assert isinstance(instance, Instance)

    with pytest.raises(DiffFormatError):
        registry.instance_from_json([1], "app.Weapon")
