import contextlib
import logging

LOG_FMT = "%(asctime)s - %(levelname)-8s - %(name)s - %(funcName)s:%(lineno)d - %(message)s"


def basic_log_config(level=logging.WARNING, **kwargs) -> None:
    """Configure logging defaults for all loggers."""
    logging.basicConfig(level=level, format=LOG_FMT, **kwargs)


@contextlib.contextmanager
def suppress_logs(logger: logging.Logger):
    """Context manager to temporarily disable logs."""
    try:
        logger.disabled = True
        yield
    finally:
        logger.disabled = False


def log_trace(logger: logging.Logger | None = None, level: int = logging.DEBUG):
    """Build a trace sink that forwards ``(tag, *payload)`` tracepoints to a logger.

    Pass the result as ``trace=`` to ``ChatOrchestrator`` to keep a record of every
    round trip in the application's logs.
    """
    logger = logger or logging.getLogger("smolchat.trace")

    def trace(tag: str, *payload) -> None:
        if logger.isEnabledFor(level):
            logger.log(level, "%s %s", tag, " ".join(repr(p) for p in payload))

    return trace
