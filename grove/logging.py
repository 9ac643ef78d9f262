"""Loggers under the ``grove`` namespace.

Only the package root logger carries a level and a handler, both installed by
:func:`grove.config.runtime_config`; module loggers inherit from it.
"""

from __future__ import annotations

import logging
from typing import Optional

from . import config as gx_config

ROOT_LOGGER_NAME = "grove"


def _qualify(name: Optional[str]) -> str:
    if not name or name == ROOT_LOGGER_NAME:
        return ROOT_LOGGER_NAME
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for ``name``, which may be a suffix such as ``"core.builder"`` or
    a module's ``__name__``; either way it lands under ``grove``."""

    gx_config.runtime_config()
    return logging.getLogger(_qualify(name))
