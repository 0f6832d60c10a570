"""Time-range grammar for the ``time`` query parameter.

Accepted shapes:

* ``"now N-H"`` / ``"now N-d"`` -- last N hours / days (hourly data)
* ``"today N-m"`` -- last N months
* ``"today+N-y"`` -- last N years
* ``"all"`` -- everything since 2004
* ``"YYYY-MM-DD YYYY-MM-DD"`` -- explicit start and end date
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from gtrends.errors import InvalidTimeFormat

TRENDS_EPOCH: date = date(2004, 1, 1)

_NOW_RE = re.compile(r"^now (\d+)-([Hd])$")
_TODAY_MONTHS_RE = re.compile(r"^today (\d+)-m$")
_TODAY_YEARS_RE = re.compile(r"^today\+(\d+)-y$")
_RANGE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2}) (\d{4}-\d{2}-\d{2})$")


@dataclass(frozen=True)
class TimeSpec:
    """A parsed ``time`` string.

    Attributes:
        kind: One of ``"now"``, ``"today"``, ``"all"`` or ``"range"``.
        raw: The input string, sent unchanged to the service.
        amount: Window length for the relative forms.
        unit: ``"H"``, ``"d"``, ``"m"`` or ``"y"`` for the relative forms.
        start: First day of an explicit range.
        end: Last day of an explicit range.
    """

    kind: str
    raw: str
    amount: Optional[int] = None
    unit: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_hourly(self) -> bool:
        """Whether the service answers with partial-day granularity."""
        return self.kind == "now"


def parse_time(
    time: Union[str, "RollingRange"],
    today: Optional[date] = None,
) -> TimeSpec:
    """Parse a ``time`` string into a :class:`TimeSpec`.

    A :class:`RollingRange` is resolved against today's date first and
    then parsed like any explicit range.

    Args:
        time: The raw time string, or a :class:`RollingRange`.
        today: Reference date for the "end not in the future" check.
            Defaults to ``date.today()``.

    Returns:
        The parsed time range.

    Raises:
        InvalidTimeFormat: If *time* is not a string or matches none of
            the accepted shapes.
    """
    if isinstance(time, RollingRange):
        time = time.as_time_string()
    if not isinstance(time, str):
        raise InvalidTimeFormat(
            f"time must be a single string, got {type(time).__name__}")

    if time == "all":
        return TimeSpec(kind="all", raw=time)

    match = _NOW_RE.match(time)
    if match:
        return TimeSpec(kind="now", raw=time,
                        amount=_positive(match.group(1), time),
                        unit=match.group(2))

    match = _TODAY_MONTHS_RE.match(time)
    if match:
        return TimeSpec(kind="today", raw=time,
                        amount=_positive(match.group(1), time), unit="m")

    match = _TODAY_YEARS_RE.match(time)
    if match:
        return TimeSpec(kind="today", raw=time,
                        amount=_positive(match.group(1), time), unit="y")

    match = _RANGE_RE.match(time)
    if match:
        start = _parse_day(match.group(1), time)
        end = _parse_day(match.group(2), time)
        if start >= end:
            raise InvalidTimeFormat(
                f"Start date must be before end date in {time!r}")
        if start < TRENDS_EPOCH:
            raise InvalidTimeFormat(
                f"Start date in {time!r} is before {TRENDS_EPOCH:%Y-%m-%d}")
        if end > (today or date.today()):
            raise InvalidTimeFormat(f"End date in {time!r} is in the future")
        return TimeSpec(kind="range", raw=time, start=start, end=end)

    raise InvalidTimeFormat(f"Can not parse the supplied time format: {time!r}")


def _positive(raw: str, time: str) -> int:
    """Convert a window length, rejecting zero."""
    value = int(raw)
    if value < 1:
        raise InvalidTimeFormat(f"Window length must be positive in {time!r}")
    return value


def _parse_day(raw: str, time: str) -> date:
    """Parse one ``YYYY-MM-DD`` half of an explicit range."""
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidTimeFormat(f"Invalid date {raw!r} in {time!r}") from exc


class RollingRange:
    """Explicit date range ending today, computed at access time.

    Stores a ``relativedelta`` offset and recomputes start/end dates
    from ``date.today()`` on every property access, so the range never
    goes stale across long-running processes.

    Args:
        **kwargs: Keyword arguments forwarded to
            :class:`dateutil.relativedelta.relativedelta`
            (e.g. ``months=6``, ``days=30``, ``years=1``).

    Example::

        rr = RollingRange(months=6)
        rr.as_time_string()  # "2026-04-18 2026-10-18"
    """

    def __init__(self, **kwargs: int) -> None:
        self._delta: relativedelta = relativedelta(**kwargs)

    @property
    def end_date(self) -> str:
        """Today's date formatted as ``YYYY-MM-DD``."""
        return date.today().strftime("%Y-%m-%d")

    @property
    def start_date(self) -> str:
        """Today minus the stored offset, clamped to the Trends epoch."""
        start = max(date.today() - self._delta, TRENDS_EPOCH)
        return start.strftime("%Y-%m-%d")

    def as_time_string(self) -> str:
        """Format the range for the ``time`` query parameter.

        Returns:
            A string in the form ``"YYYY-MM-DD YYYY-MM-DD"``.
        """
        return f"{self.start_date} {self.end_date}"
