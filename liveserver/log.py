import logging
import sys

GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
RED = "\x1b[31m"
BOLD_RED = "\x1b[1;31m"
RESET = "\x1b[0m"

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level="INFO", stream=None):
    stream = stream or sys.stderr
    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=stream,
    )


def status_level(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


def colored_status(status: int, color: bool = True) -> str:
    text = f"[{status}]"
    if not color:
        return text
    if 200 <= status < 300:
        code = GREEN
    elif 300 <= status < 400:
        code = YELLOW
    elif 400 <= status < 500:
        code = RED
    else:
        code = BOLD_RED
    return f"{code}{text}{RESET}"


def stream_is_tty(stream) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def color_enabled(logger: logging.Logger) -> bool:
    """True when every stream ``logger`` ends up writing to is a terminal."""
    streams = []
    while logger is not None:
        streams.extend(
            h.stream for h in logger.handlers if isinstance(h, logging.StreamHandler)
        )
        if not logger.propagate:
            break
        logger = logger.parent
    return bool(streams) and all(stream_is_tty(s) for s in streams)
