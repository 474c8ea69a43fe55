"""Logger factory for nodefacts modules."""

import logging
import os

LOG_LEVEL_ENV_VAR = "NODEFACTS_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"

_ROOT_LOGGER_NAME = "nodefacts"


def _configure_root() -> logging.Logger:
    """Attach a NullHandler and the environment log level to the package logger.

    Applications that configure logging themselves see nodefacts records
    through normal propagation; otherwise nothing is printed.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not any(isinstance(h, logging.NullHandler) for h in root.handlers):
        root.addHandler(logging.NullHandler())

    level_str = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    level = getattr(logging, level_str.upper(), None)
    if not isinstance(level, int):
        root.warning(
            "Invalid log level '%s' in %s, falling back to %s",
            level_str,
            LOG_LEVEL_ENV_VAR,
            DEFAULT_LOG_LEVEL,
        )
        level = getattr(logging, DEFAULT_LOG_LEVEL)
    root.setLevel(level)
    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the nodefacts hierarchy.

    Args:
        name: Logger name, usually the calling module's ``__name__``.
            Names outside the ``nodefacts`` namespace are nested under it.

    Returns:
        The configured logging.Logger instance.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        _configure_root()
    if name == _ROOT_LOGGER_NAME or name.startswith(_ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
