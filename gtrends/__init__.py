"""gtrends: Google Trends queries as pandas tables.

Usage::

    from gtrends import gtrends
    res = gtrends(["NHL", "NFL"], geo="US", time="today 12-m")
    res.interest_over_time.head()

Logging
-------
All package modules log via ``logging.getLogger(__name__)``.  A
:class:`~logging.NullHandler` is attached to the package root logger so
that log messages are silently discarded unless the calling application
configures its own handlers.

For quick console output, call :func:`setup_logging`::

    import gtrends
    gtrends.setup_logging()          # INFO to stderr
    gtrends.setup_logging("DEBUG")   # request parameters too
"""

import logging

logger: logging.Logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def setup_logging(level: str = "INFO") -> None:
    """Configure the package logger with a console handler.

    Intended for standalone scripts, notebooks, or test sessions where
    no logging configuration is in place.  Calling it twice does not
    add a second handler.

    Args:
        level: Logging level name (e.g. ``"DEBUG"``, ``"INFO"``,
            ``"WARNING"``).  Defaults to ``"INFO"``.
    """
    pkg_logger = logging.getLogger(__name__)
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(
        isinstance(h, logging.StreamHandler)
        and not isinstance(h, logging.NullHandler)
        for h in pkg_logger.handlers
    ):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        pkg_logger.addHandler(handler)


from gtrends.config import Settings  # noqa: E402
from gtrends.core import gtrends  # noqa: E402
from gtrends.csv_writer import write_result_csv  # noqa: E402
from gtrends.errors import (  # noqa: E402
    GtrendsError,
    InvalidArgument,
    InvalidCategory,
    InvalidGeo,
    InvalidTimeFormat,
    ParseError,
    RemoteError,
    TransientRemoteError,
)
from gtrends.result import GtrendsResult  # noqa: E402
from gtrends.time_range import RollingRange  # noqa: E402
from gtrends.validation import Gprop  # noqa: E402

__all__ = [
    "Gprop",
    "GtrendsError",
    "GtrendsResult",
    "InvalidArgument",
    "InvalidCategory",
    "InvalidGeo",
    "InvalidTimeFormat",
    "ParseError",
    "RemoteError",
    "RollingRange",
    "Settings",
    "TransientRemoteError",
    "gtrends",
    "setup_logging",
    "write_result_csv",
]
