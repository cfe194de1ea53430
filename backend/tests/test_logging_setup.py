import logging

import pytest

from gstimport import logging_setup


@pytest.mark.parametrize("level, expected", [
    (logging.DEBUG, logging.DEBUG),
    ("warning", logging.WARNING),
    (" Error ", logging.ERROR),
    ("15", 15),
    ("chatty", logging.INFO),
])
def test_parse_level(level, expected):
    assert logging_setup._parse_level(level) == expected


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("GSTIMPORT_LOG_LEVEL", "debug")
    assert logging_setup._parse_level(None) == logging.DEBUG
    monkeypatch.setenv("GSTIMPORT_LOG_LEVEL", "nonsense")
    assert logging_setup._parse_level(None) == logging.INFO


def test_get_logger_is_namespaced():
    log = logging_setup.get_logger("gstimport.transform.engine")
    assert log.name == "gstimport.transform.engine"
    assert logging.getLogger("gstimport").handlers


def test_host_settings_read_the_package_log_level(monkeypatch):
    import importlib

    from gstimport import config

    monkeypatch.setenv("GSTIMPORT_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    try:
        assert importlib.reload(config).settings.LOG_LEVEL == "DEBUG"
    finally:
        monkeypatch.undo()
        importlib.reload(config)
