from __future__ import annotations

import logging
import os


class SafeFormatter(logging.Formatter):
    """Formats records without stack traces.

    Storage faults can carry SQL and bound parameters in their tracebacks, so
    the default handler only names the exception type.
    """

    def format(self, record: logging.LogRecord) -> str:
        if record.exc_info:
            exc_type = record.exc_info[0].__name__ if record.exc_info[0] else "Exception"
            record.msg = f"{record.getMessage()} [exception={exc_type}]"
            record.args = ()
            record.exc_info = None
            record.exc_text = None
        return super().format(record)


def get_logger(name: str = "expense_tracker") -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(os.getenv("EXPENSES_LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler()
    handler.setFormatter(SafeFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
