"""Top-level Trends query: validate, fetch widgets, build all tables."""

import logging
from typing import Any, Callable, Optional, Sequence, Union

from gtrends.config import Settings
from gtrends.errors import GtrendsError, InvalidArgument
from gtrends.fetch import (
    REGION_TABLES,
    interest_by_region,
    interest_over_time,
    related_queries,
    related_topics,
)
from gtrends.normalize import (
    INTEREST_OVER_TIME_COLUMNS,
    REGION_COLUMNS,
    RELATED_QUERIES_COLUMNS,
    RELATED_TOPICS_COLUMNS,
    empty_table,
)
from gtrends.result import GtrendsResult
from gtrends.time_range import RollingRange
from gtrends.transport import open_session
from gtrends.validation import Gprop, StrOrSeq, validate_query
from gtrends.widgets import get_widgets

logger = logging.getLogger(__name__)

ON_ERROR_CHOICES = ("raise", "empty")


def gtrends(
    keyword: StrOrSeq,
    geo: StrOrSeq = "",
    time: Union[str, RollingRange] = "today+5-y",
    gprop: Union[str, Gprop] = "web",
    category: Union[int, Sequence[int]] = 0,
    hl: str = "en-US",
    *,
    on_error: str = "raise",
    session: Optional[Any] = None,
    settings: Optional[Settings] = None,
) -> GtrendsResult:
    """Run a Google Trends query and return every result table.

    Examples::

        gtrends("NHL").interest_over_time
        gtrends(["NHL", "NFL"], geo=["CA", "US"], category=20)
        gtrends("NHL", time="2010-01-01 2010-04-03", gprop="news")
        gtrends("NHL", time=RollingRange(months=6))

    Related topics and related queries are only retrieved for a single
    keyword; with several keywords both tables are empty.

    Args:
        keyword: One keyword or up to five.
        geo: One geo code or up to five; ``""`` means worldwide.  The
            longer of keyword/geo must be a multiple of the shorter.
        time: Time range, see :mod:`gtrends.time_range`, or a
            :class:`~gtrends.time_range.RollingRange` ending today.
        gprop: Google product: ``web``, ``news``, ``images``,
            ``froogle`` (shopping) or ``youtube``.
        category: Category id, see :func:`gtrends.reference.categories`.
        hl: Language code; only affects related-topic titles.
        on_error: ``"raise"`` (default) propagates a failure of any
            table fetch; ``"empty"`` logs it and returns that table empty.
        session: HTTP session to reuse.  A fresh one (with cookies
            primed) is opened when omitted.
        settings: Connection settings; defaults to
            :meth:`Settings.from_env`.

    Returns:
        A :class:`~gtrends.result.GtrendsResult`.

    Raises:
        InvalidArgument: Bad input; no request is issued.
        RemoteError: Non-2xx response from the service.
        ParseError: A response did not have the expected shape.
    """
    query = validate_query(keyword, geo=geo, time=time, gprop=gprop,
                           category=category, hl=hl)
    if on_error not in ON_ERROR_CHOICES:
        raise InvalidArgument(
            f"on_error must be one of {ON_ERROR_CHOICES}; got {on_error!r}")
    settings = settings or Settings.from_env()

    if session is None:
        session = open_session(settings)

    widgets = get_widgets(session, query, settings)

    def run(label: str, fetch: Callable[[], Any], fallback: Callable[[], Any]):
        try:
            return fetch()
        except GtrendsError as exc:
            if on_error == "raise":
                raise
            logger.warning("Fetching %s failed, returning it empty: %s",
                           label, exc)
            return fallback()

    iot = run("interest over time",
              lambda: interest_over_time(session, widgets, query, settings),
              lambda: empty_table(INTEREST_OVER_TIME_COLUMNS))
    regions = run("interest by region",
                  lambda: interest_by_region(session, widgets, query, settings),
                  lambda: {name: empty_table(REGION_COLUMNS)
                           for name in REGION_TABLES})
    topics = run("related topics",
                 lambda: related_topics(session, widgets, query, settings),
                 lambda: empty_table(RELATED_TOPICS_COLUMNS))
    queries = run("related queries",
                  lambda: related_queries(session, widgets, query, settings),
                  lambda: empty_table(RELATED_QUERIES_COLUMNS))

    result = GtrendsResult(
        interest_over_time=iot,
        interest_by_region=regions["region"],
        interest_by_dma=regions["dma"],
        interest_by_city=regions["city"],
        related_topics=topics,
        related_queries=queries,
    )
    logger.info("Query for %s finished: %r", ", ".join(query.keyword), result)
    return result
