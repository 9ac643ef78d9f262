import numpy as np
import pytest

from grove import GroveBuf
from grove import config as gx_config


def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in [
        "GROVE_LOG_LEVEL",
        "GROVE_DEBUG_CHECKS",
        "GROVE_WIDTH_DTYPE",
        "GROVE_INITIAL_CAPACITY",
    ]:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _restore_runtime_config():
    yield
    gx_config.reset_runtime_config_cache()


def test_runtime_config_defaults(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    gx_config.reset_runtime_config_cache()

    runtime = gx_config.runtime_config()

    assert runtime.log_level == "INFO"
    assert runtime.debug_checks is False
    assert runtime.width_dtype == "int64"
    assert runtime.numpy_width_dtype == np.dtype(np.int64)
    assert runtime.initial_capacity == 16


def test_width_dtype_override(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_WIDTH_DTYPE", "INT32")
    gx_config.reset_runtime_config_cache()

    runtime = gx_config.runtime_config()

    assert runtime.width_dtype == "int32"
    store = GroveBuf()
    store.push(1)
    assert store.widths().dtype == np.int32


def test_invalid_width_dtype(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_WIDTH_DTYPE", "float64")
    gx_config.reset_runtime_config_cache()

    with pytest.raises(ValueError):
        gx_config.runtime_config()


def test_debug_checks_parsing(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_DEBUG_CHECKS", "yes")
    gx_config.reset_runtime_config_cache()

    assert gx_config.runtime_config().debug_checks is True
    assert GroveBuf().debug_checks is True
    assert GroveBuf(debug_checks=False).debug_checks is False


def test_invalid_debug_checks(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_DEBUG_CHECKS", "sometimes")
    gx_config.reset_runtime_config_cache()

    with pytest.raises(ValueError):
        gx_config.runtime_config()


def test_initial_capacity_parsing(monkeypatch: pytest.MonkeyPatch):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_INITIAL_CAPACITY", "4")
    gx_config.reset_runtime_config_cache()

    assert gx_config.runtime_config().initial_capacity == 4
    assert GroveBuf().capacity == 4


@pytest.mark.parametrize("raw", ["0", "-3", "lots"])
def test_invalid_initial_capacity(monkeypatch: pytest.MonkeyPatch, raw: str):
    _clear_env(monkeypatch)
    monkeypatch.setenv("GROVE_INITIAL_CAPACITY", raw)
    gx_config.reset_runtime_config_cache()

    with pytest.raises(ValueError):
        gx_config.runtime_config()
