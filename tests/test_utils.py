import logging

from tourneykit.utils import set_log_level, setup_logger


def test_setup_logger_is_idempotent():
    logger = setup_logger("tourneykit.tests.idempotent")
    again = setup_logger("tourneykit.tests.idempotent")

    assert logger is again
    assert len(logger.handlers) == 1


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("TOURNEYKIT_LOG_LEVEL", "debug")
    assert setup_logger("tourneykit.tests.env_debug").level == logging.DEBUG

    monkeypatch.setenv("TOURNEYKIT_LOG_LEVEL", "loud")
    assert setup_logger("tourneykit.tests.env_unknown").level == logging.INFO


def test_set_log_level_reaches_every_package_logger():
    logger = setup_logger("tourneykit.tests.verbose")
    other = logging.getLogger("someone.else")
    other_level = other.level
    try:
        set_log_level(logging.DEBUG)
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)
        assert other.level == other_level
    finally:
        set_log_level(logging.INFO)
