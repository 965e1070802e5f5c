# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

from ._version import __version__

from .diffing import diff, DiffConfig
from .patching import patch, apply_object_diff, apply_array_diff
from .handler import DiffHandler, MessageData
from .prettyprint import diff_tree
from .registry import TypeRegistry


__all__ = [
    "__version__",
    "diff", "DiffConfig",
    "patch", "apply_object_diff", "apply_array_diff",
    "DiffHandler", "MessageData",
    "diff_tree",
    "TypeRegistry",
    ]
