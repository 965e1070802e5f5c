# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import json
import os

import pytest

from bundlediff import diffapp, patchapp
from bundlediff.config import build_config, config_paths, recursive_update


@pytest.fixture
def isolated_config(tmpdir, monkeypatch):
    "Run with an empty home and working directory."
    home = tmpdir.mkdir('home')
    work = tmpdir.mkdir('work')
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv('BUNDLEDIFF_CONFIG_DIR', raising=False)
    monkeypatch.chdir(str(work))
    return work


def write_config(dirname, config):
    with open(os.path.join(str(dirname), 'bundlediff_config.json'), 'w') as f:
        json.dump(config, f)


def test_config_paths(isolated_config, monkeypatch, tmpdir):
    paths = config_paths()
    assert paths[0] == os.getcwd()
    assert paths[-1].endswith('.bundlediff')
    assert len(paths) == 2

    monkeypatch.setenv('BUNDLEDIFF_CONFIG_DIR', str(tmpdir))
    assert config_paths()[1] == str(tmpdir)


def test_build_config_defaults(isolated_config):
    config = build_config('bdiff')
    assert config == {
        'log_level': 'INFO',
        'use_color': True,
        'atomic_paths': [],
    }
    assert build_config('bpatch') == {'log_level': 'INFO'}
    assert build_config('bpatch', True) == {'log_level': 'INFO', 'schema': None}


def test_build_config_invalid_entrypoint():
    with pytest.raises(ValueError):
        build_config('nope')


def test_config_from_file(isolated_config):
    write_config(isolated_config, {
        "Global": {"log_level": "WARN"},
        "Diff": {"atomic_paths": ["/Params/*/Curve"]},
        "Show": {"use_color": False},
    })
    config = build_config('bdiff')
    assert config['atomic_paths'] == ["/Params/*/Curve"]
    assert config['log_level'] == 'WARN'
    assert config['use_color'] is False
    assert build_config('bshow')['use_color'] is False
    assert 'atomic_paths' not in build_config('bshow')


def test_config_priority(isolated_config, monkeypatch, tmpdir):
    envdir = tmpdir.mkdir('env')
    monkeypatch.setenv('BUNDLEDIFF_CONFIG_DIR', str(envdir))
    write_config(envdir, {"Diff": {"atomic_paths": ["/A"]}, "Show": {"use_color": False}})
    write_config(isolated_config, {"Diff": {"atomic_paths": ["/B"]}})
    config = build_config('bdiff')
    # Working directory wins over the env dir, other keys merge
    assert config['atomic_paths'] == ["/B"]
    assert config['use_color'] is False


def test_config_backed_parser_defaults(isolated_config):
    write_config(isolated_config, {"Diff": {"atomic_paths": ["/Color"]}})
    args = diffapp._build_arg_parser().parse_args(['a.json', 'b.json'])
    assert args.atomic_paths == ["/Color"]
    # Command line adds to configured paths
    args = diffapp._build_arg_parser().parse_args(['a.json', 'b.json', '--atomic-path', '/Stats'])
    assert args.atomic_paths == ["/Color", "/Stats"]


def test_config_backed_parser_schema(isolated_config):
    write_config(isolated_config, {"BPatch": {"schema": "schema.json"}})
    args = patchapp._build_arg_parser().parse_args(['a.json', 'b.json'])
    assert args.schema == "schema.json"


def test_recursive_update():
    target = {"a": {"b": 1, "c": 2}, "d": 3}
    recursive_update(target, {"a": {"b": None, "e": 4}, "d": None}, False)
    assert target == {"a": {"c": 2, "e": 4}}

    target = {"a": 1}
    recursive_update(target, {"b": None}, True)
    assert target == {"a": 1, "b": None}
