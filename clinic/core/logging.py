import logging

from .config import get_settings

_formatter = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

_logger = logging.getLogger("clinic")
if not _logger.handlers:
    ch = logging.StreamHandler()
    ch.setFormatter(_formatter)
    _logger.addHandler(ch)


def get_logger(name: str) -> logging.Logger:
    """Child of the ``clinic`` logger, leveled from Settings.log_level."""
    _logger.setLevel(get_settings().log_level)
    return _logger.getChild(name)
