"""
Logging for the fee auction engine.

Subsystems log under the ``feeauction`` hierarchy (``feeauction.auction``,
``feeauction.tokens``, ``feeauction.amm.*``, ``feeauction.chain``). Console
output is colored; the CLI can additionally append plain-text records to
``<log_dir>/feeauction.log``.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import colorlog

ROOT_LOGGER = "feeauction"
LOG_FILE = "feeauction.log"

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)-8s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s" + LOG_FORMAT.replace("%(levelname)-8s", "%(levelname)-8s%(reset)s"),
            datefmt=DATE_FORMAT,
            log_colors=LOG_COLORS,
        )
    )
    return handler


def _file_handler(log_dir: Path, level: int) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


class FeeAuctionLogger:
    """Owns the handlers attached to the ``feeauction`` root logger"""

    _initialized = False

    @classmethod
    def setup(
        cls,
        level: int = logging.INFO,
        log_dir: Optional[Union[str, Path]] = None,
        force: bool = False,
    ):
        """
        Install the console handler and, if log_dir is given, a file handler.

        Args:
            level: Logging level for the root logger and its handlers
            log_dir: Directory for feeauction.log (no file output if None)
            force: Replace handlers installed by an earlier call
        """
        if cls._initialized and not force:
            return

        root_logger = logging.getLogger(ROOT_LOGGER)
        root_logger.setLevel(level)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        root_logger.addHandler(_console_handler(level))
        if log_dir is not None:
            root_logger.addHandler(_file_handler(Path(log_dir), level))

        cls._initialized = True


def get_logger(name: str) -> logging.Logger:
    """Logger for one subsystem, e.g. get_logger("auction")"""
    FeeAuctionLogger.setup()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def setup_logging(level: int = logging.INFO, log_dir: Optional[Union[str, Path]] = None):
    """(Re)configure logging; used by the CLI entry point"""
    FeeAuctionLogger.setup(level=level, log_dir=log_dir, force=True)
