# -*- coding: utf-8 -*-

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import json
import os

from pytest import fixture

from bundlediff.registry import TypeRegistry


SCHEMA = {
    "app.Weapon": {"fields": [
        {"name": "Name", "type": "String"},
        {"name": "Attack", "type": "S32"},
        {"name": "Weight", "type": "F32"},
        {"name": "Level", "type": "U8"},
        {"name": "Enabled", "type": "Bool"},
        {"name": "Id", "type": "Guid"},
        {"name": "Tags", "type": "String", "array": True},
        {"name": "Drops", "type": "U16", "array": True},
        {"name": "Stats", "type": "Struct", "original_type": "app.Stats"},
        {"name": "Effects", "type": "Object", "array": True, "original_type": "app.Effect"},
        {"name": "Upgrade", "type": "Object", "original_type": "app.Weapon"},
        {"name": "Icon", "type": "UserData"},
        {"name": "Color", "type": "Data"},
    ]},
    "app.Shield": {"fields": [
        {"name": "Name", "type": "String"},
        {"name": "Attack", "type": "S32"},
        {"name": "Defense", "type": "S32"},
    ]},
    "app.Stats": {"fields": [
        {"name": "Power", "type": "S32"},
        {"name": "Range", "type": "F64"},
    ]},
    "app.Effect": {"fields": [
        {"name": "Kind", "type": "String"},
        {"name": "Value", "type": "S32"},
    ]},
    "app.PoisonEffect": {"fields": [
        {"name": "Kind", "type": "String"},
        {"name": "Value", "type": "S32"},
        {"name": "Duration", "type": "F32"},
    ]},
}


@fixture
def slow():
    "Tag for long running tests, see the --quick and --slow options."


@fixture
def registry():
    return TypeRegistry.from_schema(SCHEMA)


@fixture
def schemafile(tmpdir):
    fn = os.path.join(str(tmpdir), 'schema.json')
    with open(fn, 'w') as f:
        json.dump(SCHEMA, f)
    return fn
