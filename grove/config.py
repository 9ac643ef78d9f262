from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import numpy as np

_SUPPORTED_WIDTH_DTYPES = {"int32", "int64"}
_DEFAULT_CAPACITY = 16


def _bool_from_env(value: str | None, *, default: bool) -> bool:
    if value is None:
        return default
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value '{value}'")


def _normalise_width_dtype(value: str | None) -> str:
    if value is None:
        return "int64"
    value = value.strip().lower()
    if value not in _SUPPORTED_WIDTH_DTYPES:
        raise ValueError(
            f"Unsupported width dtype '{value}'. Expected one of {_SUPPORTED_WIDTH_DTYPES}."
        )
    return value


def _resolve_capacity(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return _DEFAULT_CAPACITY
    try:
        capacity = int(raw)
    except ValueError as exc:
        raise ValueError(f"Initial capacity must be an integer, got '{raw}'") from exc
    if capacity < 1:
        raise ValueError(f"Initial capacity must be >= 1, got {capacity}")
    return capacity


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str
    debug_checks: bool
    width_dtype: str
    initial_capacity: int

    @property
    def numpy_width_dtype(self) -> np.dtype:
        return np.dtype(self.width_dtype)


_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _GroveStreamHandler(logging.StreamHandler):
    """Default stderr handler; handlers added by applications are left alone."""


def _configure_logging(level: str) -> None:
    root = logging.getLogger("grove")
    root.setLevel(level)
    handler = next(
        (h for h in root.handlers if isinstance(h, _GroveStreamHandler)), None
    )
    if handler is None:
        handler = _GroveStreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    handler.setLevel(level)


@lru_cache(maxsize=None)
def runtime_config() -> RuntimeConfig:
    log_level = os.getenv("GROVE_LOG_LEVEL", "INFO").upper()
    debug_checks = _bool_from_env(os.getenv("GROVE_DEBUG_CHECKS"), default=False)
    width_dtype = _normalise_width_dtype(os.getenv("GROVE_WIDTH_DTYPE"))
    initial_capacity = _resolve_capacity(os.getenv("GROVE_INITIAL_CAPACITY"))

    config = RuntimeConfig(
        log_level=log_level,
        debug_checks=debug_checks,
        width_dtype=width_dtype,
        initial_capacity=initial_capacity,
    )
    _configure_logging(config.log_level)
    return config


def reset_runtime_config_cache() -> None:
    runtime_config.cache_clear()
