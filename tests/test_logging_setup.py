"""Tests for logging setup."""

import logging

import vaultwatch.logging_setup as ls


def _vaultwatch_handlers() -> list[logging.Handler]:
    # pytest may attach its own capture handlers to the logger as well
    logger = logging.getLogger("vaultwatch")
    return [h for h in logger.handlers if h.get_name() == ls.HANDLER_NAME]


class TestSetupLogging:
    def setup_method(self):
        # Reset the module-level flag for each test
        ls._CONFIGURED = False
        logger = logging.getLogger("vaultwatch")
        for handler in _vaultwatch_handlers():
            handler.close()
            logger.removeHandler(handler)

    teardown_method = setup_method

    def test_setup_creates_stderr_handler(self):
        ls.setup_logging()
        logger = logging.getLogger("vaultwatch")
        handlers = _vaultwatch_handlers()
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert not isinstance(handlers[0], logging.FileHandler)
        assert logger.level == logging.INFO
        assert logger.propagate is False

    def test_idempotent(self):
        ls.setup_logging()
        ls.setup_logging(level=logging.DEBUG)
        logger = logging.getLogger("vaultwatch")
        assert len(_vaultwatch_handlers()) == 1
        assert logger.level == logging.INFO

    def test_log_file(self, tmp_path):
        log_file = tmp_path / "vaultwatch.log"
        ls.setup_logging(level=logging.DEBUG, log_file=log_file)
        logging.getLogger("vaultwatch.metrics").debug("hello %s", "file")
        handlers = _vaultwatch_handlers()
        assert isinstance(handlers[0], logging.FileHandler)
        handlers[0].flush()
        assert "hello file" in log_file.read_text()
        assert "vaultwatch.metrics" in log_file.read_text()
