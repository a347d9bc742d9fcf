"""
Console logging for generation runs.

Every module logs under "apigen.gen"; the CLI picks the level once per command.
"""

import logging
import sys

LOGGER_NAME = "apigen.gen"


def get_logger(name: str = None) -> logging.Logger:
    """'apigen.api.generators.targets.go_gin' logs as 'apigen.gen.go_gin'."""
    root = logging.getLogger(LOGGER_NAME)
    if not name or name == LOGGER_NAME:
        return root
    return root.getChild(name.rpartition(".")[2])


def gen_log_level(verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    return logging.WARNING if quiet else logging.INFO


def configure_gen_logging(verbose: bool = False, quiet: bool = False, stream=None) -> logging.Handler:
    """
    Send generation messages to `stream` (stderr by default) without decoration.

    Messages carry their own [PHASE]/[WARN] tags. A second call only changes
    the level; the first handler keeps its stream.
    """
    level = gen_log_level(verbose, quiet)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    for existing in logger.handlers:
        existing.setLevel(level)
    if logger.handlers:
        return logger.handlers[0]

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return handler
