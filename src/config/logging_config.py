# src/config/logging_config.py

"""Per-run timestamped logging configuration for price_compare.

Each process launch (CLI search or API server) creates a dedicated log
file inside ``logs/`` named after the launch timestamp, e.g.
``logs/run_20261019_153045.log``.  Every ``price_compare.*`` logger
(aggregator, cache, one logger per market provider) routes through it.

Provider failures are collapsed into empty results, so the log file is
the only place where a failing market leaves a trace.  Error records
therefore keep full tracebacks and module paths.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

ROOT_LOGGER_NAME = "price_compare"

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that flood DEBUG output during a browser session
_NOISY_LOGGERS: tuple[str, ...] = ("asyncio", "urllib3", "playwright")


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Initialise the root ``price_compare`` logger for the current run.

    Args:
        console_level: Minimum level echoed to stderr. The log file
            always receives DEBUG and above.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, API reload) must not stack handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
