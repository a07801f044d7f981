import logging

from repo_status.logging_utils import PACKAGE_LOGGER, configure_logging


def _handler_levels():
    logger = logging.getLogger(PACKAGE_LOGGER)
    return {type(h).__name__: h.level for h in logger.handlers}


def test_warnings_always_reach_stderr():
    configure_logging(verbosity=0)
    assert _handler_levels() == {"StreamHandler": logging.WARNING}


def test_debug_flag_copies_progress_to_stderr():
    configure_logging(verbosity=0, debug=True)
    assert _handler_levels() == {"StreamHandler": logging.INFO}


def test_log_file_sink_gets_progress_lines(tmp_path):
    configure_logging(verbosity=2, log_file=tmp_path / "check.log")
    assert _handler_levels() == {"StreamHandler": logging.DEBUG, "FileHandler": logging.DEBUG}


def test_reconfiguring_replaces_handlers():
    configure_logging(verbosity=0)
    configure_logging(verbosity=1)
    assert len(logging.getLogger(PACKAGE_LOGGER).handlers) == 1
