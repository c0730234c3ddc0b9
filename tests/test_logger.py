import logging

from logger import LOGGER_NAME, setup_logging


def test_setup_logging_writes_file_and_emits(tmp_path) -> None:
    log_file = tmp_path / "logs" / "subtitle_sync.log"
    logger, emitter = setup_logging(log_file)
    received = []
    emitter.log_message.connect(received.append)
    try:
        logging.getLogger(LOGGER_NAME).info("[TEST] hello")
        for handler in logger.handlers:
            handler.flush()

        assert received == ["[TEST] hello"]
        assert "[TEST] hello" in log_file.read_text(encoding="utf-8")
    finally:
        setup_logging(with_signals=False)


def test_setup_logging_does_not_stack_handlers() -> None:
    setup_logging(with_signals=False)
    logger, emitter = setup_logging(with_signals=False)
    assert emitter is None
    assert len(logger.handlers) == 1
