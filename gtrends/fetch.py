"""Fetch-and-parse routines, one per result table.

Each routine consumes the widgets returned by
:func:`gtrends.widgets.get_widgets`, issues one request per widget (per
resolution for the region breakdown) and returns normalized tables.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from gtrends.config import Settings
from gtrends.errors import ParseError
from gtrends.normalize import (
    REGION_COLUMNS,
    RELATED_QUERIES_COLUMNS,
    RELATED_TOPICS_COLUMNS,
    empty_table,
    parse_geo_map,
    parse_interest_over_time,
    parse_related_queries,
    parse_related_topics,
)
from gtrends.transport import get_json
from gtrends.types import ComparisonItem, Json, Widget
from gtrends.validation import Query
from gtrends.widgets import (
    GEO_MAP,
    RELATED_QUERIES,
    RELATED_TOPICS,
    TIMESERIES,
    select_widgets,
)

logger = logging.getLogger(__name__)

REGION_TABLES = ("region", "dma", "city")

_HOURLY_RESOLUTIONS = {"MINUTE", "EIGHT_MINUTE", "SIXTEEN_MINUTE", "HOUR"}


def _widget_params(widget: Widget, settings: Settings, hl: str,
                   request: Optional[Json] = None) -> Dict[str, Any]:
    """Query-string parameters for a widgetdata request.

    *request* replaces the widget's own ``request`` object when given.
    """
    return {
        "hl": hl,
        "tz": settings.tz,
        "req": json.dumps(request if request is not None else widget["request"]),
        "token": widget["token"],
    }


def _item_index(widget: Widget, n_items: int) -> int:
    """Index of the comparison item a per-item widget belongs to.

    ``GEO_MAP_2`` belongs to item 2; an unsuffixed id to item 0.
    """
    _, _, suffix = widget["id"].rpartition("_")
    index = int(suffix) if suffix.isdigit() else 0
    if index >= n_items:
        raise ParseError(
            f"Widget {widget['id']!r} refers to a missing comparison item")
    return index


def interest_over_time(session: Any, widgets: List[Widget], query: Query,
                       settings: Settings) -> pd.DataFrame:
    """Fetch the time series of every comparison item.

    Args:
        session: HTTP session used for the requests.
        widgets: Widgets returned by the explore endpoint.
        query: The validated query.
        settings: Connection settings.

    Returns:
        The long-form ``interest_over_time`` table.

    Raises:
        ParseError: If there is no time-series widget or a payload is
            malformed.
        RemoteError: On a non-2xx response.
    """
    series_widgets = select_widgets(widgets, TIMESERIES)
    if not series_widgets:
        raise ParseError("Explore response has no TIMESERIES widget")

    items = query.comparison_items
    frames = []
    offset = 0
    for widget in series_widgets:
        n_items = len(widget["request"].get("comparisonItem", [])) \
            or len(items) - offset
        widget_items = items[offset:offset + n_items]
        offset += n_items

        resolution = widget["request"].get("resolution", "")
        hourly = query.time.is_hourly or resolution in _HOURLY_RESOLUTIONS

        logger.info("Requesting interest over time for %d item(s)",
                    len(widget_items))
        payload = get_json(session,
                           f"{settings.api_url}/widgetdata/multiline",
                           _widget_params(widget, settings, query.hl),
                           settings)
        frames.append(parse_interest_over_time(
            payload, widget_items, query.gprop.value, query.category, hourly))

    result = pd.concat(frames, ignore_index=True) if len(frames) > 1 \
        else frames[0]
    logger.info("Parsed %d interest-over-time row(s)", len(result))
    return result


def region_resolutions(geo: str) -> Dict[str, Optional[str]]:
    """Map each region table to the resolution requested for *geo*.

    ``None`` means the breakdown is not available for that geo and the
    table stays empty.
    """
    country = geo.split("-")[0]
    if not geo:
        region = "COUNTRY"
    elif "-" in geo:
        region = None
    else:
        region = "REGION"
    return {
        "region": region,
        "dma": "DMA" if country == "US" else None,
        "city": "CITY",
    }


def _geo_map_payload(session: Any, widget: Widget, resolution: str,
                     item: ComparisonItem, query: Query,
                     settings: Settings) -> Json:
    """Request one resolution of a GEO_MAP widget."""
    request = dict(widget["request"], resolution=resolution)
    logger.info("Requesting %s breakdown for %s (%s)", resolution,
                item["keyword"], item["geo"] or "world")
    return get_json(
        session, f"{settings.api_url}/widgetdata/comparedgeo",
        _widget_params(widget, settings, query.hl, request), settings)


def interest_by_region(session: Any, widgets: List[Widget], query: Query,
                       settings: Settings) -> Dict[str, pd.DataFrame]:
    """Fetch the region, DMA and city breakdowns.

    Args:
        session: HTTP session used for the requests.
        widgets: Widgets returned by the explore endpoint.
        query: The validated query.
        settings: Connection settings.

    Returns:
        A dict with ``region``, ``dma`` and ``city`` tables.  Breakdowns
        that are unavailable come back as empty tables.
    """
    items = query.comparison_items
    geo_widgets = select_widgets(widgets, GEO_MAP)
    per_item = {_item_index(w, len(items)): w
                for w in geo_widgets if w["id"] != GEO_MAP}
    combined = next((w for w in geo_widgets if w["id"] == GEO_MAP), None)
    # resolution -> payload of the combined widget, shared by all items
    combined_payloads: Dict[str, Json] = {}

    frames: Dict[str, List[pd.DataFrame]] = {name: [] for name in REGION_TABLES}
    for i, item in enumerate(items):
        if i in per_item:
            widget, value_index = per_item[i], 0
        elif combined is not None:
            widget, value_index = combined, i
        else:
            logger.warning("No region widget for %s (%s)", item["keyword"],
                           item["geo"] or "world")
            continue

        for name, resolution in region_resolutions(item["geo"]).items():
            if resolution is None:
                continue
            if widget is combined and resolution in combined_payloads:
                payload = combined_payloads[resolution]
            else:
                payload = _geo_map_payload(session, widget, resolution, item,
                                           query, settings)
                if widget is combined:
                    combined_payloads[resolution] = payload
            frames[name].append(parse_geo_map(payload, item,
                                              query.gprop.value, value_index))

    result = {}
    for name in REGION_TABLES:
        parts = [f for f in frames[name] if not f.empty]
        result[name] = pd.concat(parts, ignore_index=True) if parts \
            else empty_table(REGION_COLUMNS)
    return result


def _related(session: Any, widgets: List[Widget], query: Query,
             settings: Settings, prefix: str, parser, columns: List[str],
             label: str) -> pd.DataFrame:
    """Fetch one related-searches table, shared by topics and queries."""
    if not query.single_keyword:
        logger.info("Skipping %s: only available for a single keyword", label)
        return empty_table(columns)

    related_widgets = select_widgets(widgets, prefix)
    if not related_widgets:
        logger.info("No %s widget returned; table left empty", label)
        return empty_table(columns)

    items = query.comparison_items
    frames = []
    for widget in related_widgets:
        item = items[_item_index(widget, len(items))]
        logger.info("Requesting %s for %s (%s)", label, item["keyword"],
                    item["geo"] or "world")
        payload = get_json(
            session, f"{settings.api_url}/widgetdata/relatedsearches",
            _widget_params(widget, settings, query.hl), settings)
        frame = parser(payload, item, query.category)
        if not frame.empty:
            frames.append(frame)

    if not frames:
        return empty_table(columns)
    return pd.concat(frames, ignore_index=True)


def related_topics(session: Any, widgets: List[Widget], query: Query,
                   settings: Settings) -> pd.DataFrame:
    """Fetch top and rising related topics.

    Only available for a single keyword; otherwise returns an empty
    table without touching the network.  Topic titles follow
    ``query.hl``.
    """
    return _related(session, widgets, query, settings, RELATED_TOPICS,
                    parse_related_topics, RELATED_TOPICS_COLUMNS,
                    "related topics")


def related_queries(session: Any, widgets: List[Widget], query: Query,
                    settings: Settings) -> pd.DataFrame:
    """Fetch top and rising related queries (single keyword only)."""
    return _related(session, widgets, query, settings, RELATED_QUERIES,
                    parse_related_queries, RELATED_QUERIES_COLUMNS,
                    "related queries")
