"""
Logging for apidelta.

Every module logs through ``get_logger(__name__)`` under the ``apidelta``
namespace, mostly at DEBUG (skipped symbols, unrelated type changes,
traversal of symbols missing from the call graph). Nothing is configured on
import; applications call ``setup_logging`` to route these records to a
rich console and optionally a file.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "apidelta"

FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the verbosity flags to a level. ``quiet`` wins over ``verbose``."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def _console_handler(verbose: bool) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    handler = logging.FileHandler(log_file, mode="a")
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
    return handler


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route apidelta log records to a rich console handler.

    Only the ``apidelta`` logger is touched; the root logger and other
    libraries keep their configuration. Calling this again replaces the
    handlers installed by the previous call.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append logs to

    Returns:
        The configured ``apidelta`` logger
    """
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(verbose))
    if log_file:
        logger.addHandler(_file_handler(log_file))

    logger.setLevel(resolve_level(verbose, quiet))
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger under the ``apidelta`` namespace.

    Module names inside the package (``apidelta.analyzers.api_differ``) are
    used as is; other names are prefixed, so ``get_logger("impact")`` returns
    ``apidelta.impact``. Without a name the package logger is returned.
    """
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
