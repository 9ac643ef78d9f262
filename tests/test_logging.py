import logging

import pytest

from grove import GroveBuf
from grove import config as gx_config
from grove.logging import get_logger


@pytest.fixture(autouse=True)
def _restore_runtime_config():
    yield
    gx_config.reset_runtime_config_cache()


def _default_handlers() -> list:
    return [
        handler
        for handler in logging.getLogger("grove").handlers
        if isinstance(handler, gx_config._GroveStreamHandler)
    ]


def test_logger_respects_runtime_level(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GROVE_LOG_LEVEL", "DEBUG")
    gx_config.reset_runtime_config_cache()

    logger = get_logger("tests.logging")

    assert logger.name == "grove.tests.logging"
    assert logger.level == logging.NOTSET
    assert logger.getEffectiveLevel() == logging.DEBUG


def test_logger_accepts_module_names():
    assert get_logger("grove.core.builder").name == "grove.core.builder"
    assert get_logger("core.builder") is get_logger("grove.core.builder")
    assert get_logger().name == "grove"
    assert get_logger("grove").name == "grove"


def test_root_logger_has_single_default_handler():
    gx_config.reset_runtime_config_cache()
    gx_config.runtime_config()
    gx_config.reset_runtime_config_cache()
    gx_config.runtime_config()

    assert len(_default_handlers()) == 1


def test_reload_relevels_default_handler(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GROVE_LOG_LEVEL", "DEBUG")
    gx_config.reset_runtime_config_cache()
    gx_config.runtime_config()
    monkeypatch.setenv("GROVE_LOG_LEVEL", "WARNING")
    gx_config.reset_runtime_config_cache()
    gx_config.runtime_config()

    (handler,) = _default_handlers()
    assert handler.level == logging.WARNING
    assert logging.getLogger("grove").level == logging.WARNING


def test_application_handlers_are_kept():
    extra = logging.NullHandler()
    root = logging.getLogger("grove")
    root.addHandler(extra)
    try:
        gx_config.reset_runtime_config_cache()
        gx_config.runtime_config()
        assert extra in root.handlers
        assert len(_default_handlers()) == 1
    finally:
        root.removeHandler(extra)


def test_discarded_levels_are_logged(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger="grove.core.builder")
    store = GroveBuf()

    with store.builder() as builder:
        builder.open().open().push(1)

    assert "Discarding 2 unclosed open() level(s)." in caplog.text
    assert len(store) == 1
