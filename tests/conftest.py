import logging

import pytest

import logging_setup


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("LEDGERLENS_LOG_LEVEL", "LEDGERLENS_DEFAULT_CURRENCY", "LEDGERLENS_SETTINGS_PATH"):
        monkeypatch.delenv(name, raising=False)

    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    pkg_logger = logging.getLogger(logging_setup.PKG_LOGGER_NAME)
    handlers = list(pkg_logger.handlers)
    propagate = pkg_logger.propagate
    level = pkg_logger.level
    yield
    pkg_logger.handlers = handlers
    pkg_logger.propagate = propagate
    pkg_logger.setLevel(level)
