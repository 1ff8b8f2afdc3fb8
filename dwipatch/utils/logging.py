import logging
import sys

DEFAULT_FORMAT = "[%(asctime)s][%(name)s] %(levelname)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


class CustomHandler(logging.Handler):
    """Stream handler writing a bare newline for empty messages.

    Non-empty records are formatted as usual. When ``filename`` is given the
    handler owns the file and closes it with itself.
    """

    def __init__(self, stream=None, filename=None):
        super().__init__()
        if filename is not None:
            self._should_close = True
            self.stream = open(filename, "a", encoding="utf-8")
        else:
            self._should_close = False
            self.stream = stream if stream is not None else sys.stdout

    def emit(self, record):
        try:
            msg = record.getMessage()
            self.stream.write("\n" if msg == "" else self.format(record) + "\n")
            self.flush()
        except Exception:
            self.handleError(record)

    def flush(self):
        if self.stream and hasattr(self.stream, "flush"):
            self.stream.flush()

    def close(self):
        if self._should_close and not self.stream.closed:
            self.stream.close()
        super().close()


def _make_handler(level, fmt, datefmt, filename):
    if filename:
        handler = CustomHandler(filename=filename)
    else:
        handler = CustomHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def get_logger(name="dwipatch", filename=None, force=False):
    """Return a logger instance configured for dwipatch.

    Module level loggers (``logging.getLogger(__name__)``) inside the package
    are children of the ``dwipatch`` logger and therefore inherit its handler.

    Parameters
    ----------
    name : str
        The logger name.
    filename : str, Path or None, optional
        If provided, log messages are appended to this file instead of being
        sent to stdout.
    force : bool, optional
        If True, handlers already attached to the logger are replaced, which
        allows reconfiguring a logger that was set up before.

    Returns
    -------
    _logger : logging.Logger
        Configured logger.
    """
    _logger = logging.getLogger(name)
    if force or not _logger.handlers:
        for handler in _logger.handlers[:]:
            _logger.removeHandler(handler)
            handler.close()
        _logger.addHandler(
            _make_handler(logging.INFO, DEFAULT_FORMAT, DEFAULT_DATEFMT, filename)
        )
        _logger.setLevel(logging.INFO)
        _logger.propagate = False
    return _logger


def configure_logger(
    level=logging.INFO,
    fmt=DEFAULT_FORMAT,
    datefmt=DEFAULT_DATEFMT,
    filename=None,
    name="dwipatch",
):
    """Reconfigure the dwipatch logger.

    Parameters
    ----------
    level : int or str
        Logging level (e.g., ``logging.DEBUG`` or ``"DEBUG"``).
    fmt : str, optional
        Log message format.
    datefmt : str, optional
        Date format for log messages.
    filename : str, Path or None, optional
        If provided, log messages are saved to this file. If ``None``,
        logs are sent to stdout.
    name : str, optional
        The logger to reconfigure.

    Returns
    -------
    logging.Logger
        The reconfigured logger.
    """
    _logger = logging.getLogger(name)
    for handler in _logger.handlers[:]:
        _logger.removeHandler(handler)
        handler.close()
    _logger.addHandler(_make_handler(level, fmt, datefmt, filename))
    _logger.setLevel(level)
    _logger.propagate = False
    return _logger


# Provide a default logger for convenience
logger = get_logger()
