# coding: utf-8

# Copyright (c) bundlediff Development Team.
# Distributed under the terms of the Modified BSD License.

import logging


class DiffFormatError(ValueError):
    "A diff does not have the shape of the bundlediff wire format."


def init_logging(level=logging.INFO):
    """Configure root logging for the command line apps.

    Python warnings are routed through logging as well.
    """
    fmt = '[%(levelname)1.1s %(module)s:%(lineno)d] %(message)s'
    logging.basicConfig(format=fmt, level=level)
    logging.captureWarnings(True)


def set_bundlediff_log_level(level, set_main=True):
    """Set the level of the bundlediff logger, and of the root logger
    unless set_main is false."""
    logger.setLevel(level)
    if set_main:
        logging.getLogger().setLevel(level)


logger = logging.getLogger('bundlediff')

debug = logger.debug
info = logger.info
warning = logger.warning
error = logger.error
exception = logger.exception
critical = logger.critical
