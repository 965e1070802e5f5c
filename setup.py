#!/usr/bin/env python
# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.
from setuptools import setup, find_packages
import pathlib
import re

HERE = pathlib.Path(__file__).parent.absolute()

BUNDLEDIFF_PATH = HERE / "bundlediff"


def get_version(path):
    with open(path) as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M)
    return match.group(1)


VERSION = get_version(BUNDLEDIFF_PATH / '_version.py')

with open(HERE / 'README.md') as f:
    LONG_DESCRIPTION = f.read()


if __name__ == '__main__':
    setup(
      name="bundlediff",
      version=VERSION,
      description="Minimal structural diff and patch of json game resource trees",
      long_description=LONG_DESCRIPTION,
      long_description_content_type="text/markdown",
      license="BSD",
      packages=find_packages(include=["bundlediff", "bundlediff.*"]),
      python_requires=">=3.8",
      install_requires=[
          "colorama>=0.4.6",
          "traitlets>=5",
      ],
      extras_require={
          "test": [
              "pytest>=6.0",
          ],
      },
      entry_points={
          "console_scripts": [
              "bundlediff = bundlediff.__main__:main_dispatch",
              "bdiff = bundlediff.diffapp:main",
              "bpatch = bundlediff.patchapp:main",
              "bshow = bundlediff.showapp:main",
          ],
      },
      )
