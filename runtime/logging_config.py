import logging
from typing import Optional

LOGGER_NAME = "editable_mesh"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"


def _reset_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(
    log_file: Optional[str] = None,
    *,
    quiet: bool = False,
    debug: bool = False,
) -> logging.Logger:
    """Configure and return the shared ``editable_mesh`` logger.

    Calling it again replaces the handlers installed by the previous call.
    Nothing is written to disk unless ``log_file`` is given; ``quiet`` drops
    the console handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    # Records still reach the root logger so pytest's caplog sees them.
    logger.propagate = True

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    _reset_handlers(logger)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
        except OSError as exc:
            print(f"[logging] Could not open log file '{log_file}': {exc}")
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
            logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    logger.debug(
        "Logging configured (file=%s, quiet=%s, debug=%s)", log_file, quiet, debug
    )
    return logger
