# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

from .config import DiffConfig
from .generic import diff, diff_objects, diff_arrays

__all__ = ["diff", "diff_objects", "diff_arrays", "DiffConfig"]
