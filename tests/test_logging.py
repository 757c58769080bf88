import logging

import pytest

from sigcalc.core import settings
from sigcalc.logging import get_logger, level_name, setup_logging


@pytest.fixture
def quiet_logging():
    """Restore a handler-free WARNING configuration after the test."""
    yield
    setup_logging(level="WARNING", log_file="")


def _flush() -> None:
    for handler in logging.getLogger("sigcalc").handlers:
        handler.flush()


def test_get_logger_parents_under_package() -> None:
    assert get_logger("sigcalc.core.evaluator").name == "sigcalc.core.evaluator"
    assert get_logger("helpers").name == "sigcalc.helpers"


def test_level_name() -> None:
    assert level_name("debug") == "DEBUG"
    with pytest.raises(ValueError, match="verbose"):
        level_name("verbose")


def test_setup_logging_file_handler(tmp_path, quiet_logging) -> None:
    log_file = tmp_path / "debug.log"
    setup_logging(level="DEBUG", log_file=str(log_file))
    get_logger("sigcalc.test").debug("hello from the test")
    _flush()
    assert "hello from the test" in log_file.read_text()


def test_quiet_levels_get_null_handler(tmp_path, quiet_logging) -> None:
    setup_logging(level="WARNING", log_file=str(tmp_path / "unused.log"))
    handlers = logging.getLogger("sigcalc").handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.NullHandler)
    assert not (tmp_path / "unused.log").exists()


def test_empty_log_file_disables_file_output(quiet_logging) -> None:
    setup_logging(level="DEBUG", log_file="")
    handlers = logging.getLogger("sigcalc").handlers
    assert [type(h) for h in handlers] == [logging.NullHandler]


def test_defaults_come_from_settings(tmp_path, quiet_logging) -> None:
    log_file = tmp_path / "from_settings.log"
    settings.set_setting("log_level", "info")
    settings.set_setting("log_file", str(log_file))

    setup_logging()
    assert logging.getLogger("sigcalc").level == logging.INFO

    get_logger("sigcalc.test").info("configured from settings")
    get_logger("sigcalc.test").debug("below the configured level")
    _flush()
    text = log_file.read_text()
    assert "configured from settings" in text
    assert "below the configured level" not in text


def test_reconfiguring_closes_previous_file(tmp_path, quiet_logging) -> None:
    setup_logging(level="DEBUG", log_file=str(tmp_path / "first.log"))
    first = logging.getLogger("sigcalc").handlers[0]
    setup_logging(level="DEBUG", log_file=str(tmp_path / "second.log"))
    assert first not in logging.getLogger("sigcalc").handlers
    assert first.stream is None
