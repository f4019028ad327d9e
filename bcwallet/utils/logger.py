"""
Logging setup for bcwallet.

Everything logs under the ``bcwallet`` hierarchy (``bcwallet.keys``,
``bcwallet.ledger``, ``bcwallet.cli`` ...). Library modules only fetch
loggers; handlers are installed once by the application through
``setup_logging``:

- a colored console handler on stderr (stdout belongs to the CLI dialogue)
- optionally a plain-text ``bcwallet.log`` in the configured log directory

Key material is never passed to any logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import colorlog

ROOT_LOGGER = "bcwallet"
LOG_FILE_NAME = "bcwallet.log"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
COLOR_LOG_FORMAT = "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: Union[int, str]) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(
        COLOR_LOG_FORMAT,
        datefmt=DATE_FORMAT,
        log_colors=LOG_COLORS,
    ))
    return handler


def _file_handler(level: Union[int, str], log_dir: Path) -> logging.Handler:
    log_dir.mkdir(exist_ok=True, parents=True)
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


class WalletLogger:
    """Installs and tracks the handlers of the ``bcwallet`` logger."""

    log_file: Optional[Path] = None

    @classmethod
    def setup(
        cls,
        level: Union[int, str] = logging.INFO,
        log_dir: Optional[Union[str, Path]] = None,
        log_to_file: bool = False,
    ) -> logging.Logger:
        """
        (Re)configure the ``bcwallet`` logger.

        Calling it again replaces the handlers installed by an earlier call,
        closing any open log file.

        Args:
            level: Logging level name or number
            log_dir: Directory for bcwallet.log; ./logs when None
            log_to_file: Also write records to the log file

        Returns:
            The configured root logger of the package
        """
        root = logging.getLogger(ROOT_LOGGER)
        cls.reset()
        root.setLevel(level)
        root.addHandler(_console_handler(level))

        if log_to_file:
            directory = Path(log_dir) if log_dir else Path("logs")
            root.addHandler(_file_handler(level, directory))
            cls.log_file = directory / LOG_FILE_NAME

        return root

    @classmethod
    def reset(cls):
        """Remove and close every handler installed by setup()."""
        root = logging.getLogger(ROOT_LOGGER)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        cls.log_file = None

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        Logger for one subsystem (e.g. 'keys', 'builder', 'ledger').

        Does not install handlers: library code stays quiet until the
        application calls setup().
        """
        return logging.getLogger(f"{ROOT_LOGGER}.{name}")


# Convenience functions
def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific subsystem"""
    return WalletLogger.get_logger(name)


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[Union[str, Path]] = None,
    log_to_file: bool = False,
) -> logging.Logger:
    """Setup logging configuration"""
    return WalletLogger.setup(level=level, log_dir=log_dir, log_to_file=log_to_file)
