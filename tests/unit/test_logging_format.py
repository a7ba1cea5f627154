import logging

from expense_tracker.core.logging import SafeFormatter, get_logger


def _record(msg: str, exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="expense_tracker",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


def test_tracebacks_collapsed_to_exception_type() -> None:
    try:
        raise RuntimeError("INSERT INTO expenses VALUES ('secret lunch')")
    except RuntimeError as exc:
        record = _record("Storage fault", exc_info=(type(exc), exc, exc.__traceback__))

    output = SafeFormatter("%(levelname)s %(message)s").format(record)
    assert output == "ERROR Storage fault [exception=RuntimeError]"
    assert "secret lunch" not in output
    assert record.exc_info is None


def test_plain_messages_untouched() -> None:
    output = SafeFormatter("%(message)s").format(_record("Created expense id=1"))
    assert output == "Created expense id=1"


def test_get_logger_configures_once() -> None:
    logger = get_logger("expense_tracker.test_once")
    again = get_logger("expense_tracker.test_once")
    assert logger is again
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, SafeFormatter)
    assert logger.propagate is False
