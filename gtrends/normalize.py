"""Turn raw Trends widget payloads into tidy DataFrames.

These functions are pure: they take decoded JSON payloads and return
tables, and never touch the network.
"""

from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from gtrends.errors import ParseError
from gtrends.types import (
    ComparisonItem,
    InterestOverTimeRow,
    Json,
    RegionRow,
    RelatedQueryRow,
    RelatedTopicRow,
)

INTEREST_OVER_TIME_COLUMNS: List[str] = list(InterestOverTimeRow.__annotations__)
REGION_COLUMNS: List[str] = list(RegionRow.__annotations__)
RELATED_TOPICS_COLUMNS: List[str] = list(RelatedTopicRow.__annotations__)
RELATED_QUERIES_COLUMNS: List[str] = list(RelatedQueryRow.__annotations__)

SECTIONS: Sequence[str] = ("top", "rising")
LOW_VOLUME_LABEL: str = "<1"


def empty_table(columns: List[str]) -> pd.DataFrame:
    """Return an empty DataFrame with the given columns."""
    return pd.DataFrame(columns=columns)


def _default_section(payload: Json, key: str) -> List[Json]:
    """Return the list of objects stored under ``default.<key>``.

    Raises:
        ParseError: If ``default`` is missing, ``default.<key>`` is not a
            list, or one of its records is not an object.
    """
    default = payload.get("default")
    if not isinstance(default, dict):
        raise ParseError("Widget payload has no 'default' object")
    return _objects(default.get(key, []), f"default.{key}")


def _objects(entries: Any, where: str) -> List[Json]:
    """Check that *entries* is a list of JSON objects.

    Raises:
        ParseError: If it is not.
    """
    if not isinstance(entries, list):
        raise ParseError(f"'{where}' is not a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ParseError(f"'{where}' holds a non-object record: {entry!r}")
    return entries


def _to_int(raw: Any, field: str) -> int:
    """Convert a numeric payload field, raising ParseError on junk.

    Booleans and non-integral floats are rejected as well.
    """
    if isinstance(raw, bool):
        raise ParseError(f"{field} is not a number: {raw!r}")
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ParseError(f"{field} is not a number: {raw!r}") from exc
    if isinstance(raw, float) and raw != value:
        raise ParseError(f"{field} is not an integer: {raw!r}")
    return value


def _is_low_volume(formatted: Optional[str], has_data: Optional[bool]) -> bool:
    """Whether Google reported the value as ``"<1"`` or without data."""
    return formatted == LOW_VOLUME_LABEL or has_data is False


def _nth(values: Any, i: int, default: Any = None) -> Any:
    """Return ``values[i]``, or *default* when it is missing."""
    if isinstance(values, list) and i < len(values):
        return values[i]
    return default


def timeline_to_wide(payload: Json, n_items: int) -> pd.DataFrame:
    """Build the wide time-series table from a multiline payload.

    One row per date with ``hits_<i>`` and ``low_<i>`` columns for each
    comparison item, plus the formatted time label and the partial flag.

    Args:
        payload: Decoded multiline payload.
        n_items: Number of comparison items the widget covers.

    Returns:
        The wide DataFrame; empty when the payload has no timeline.

    Raises:
        ParseError: If a record lacks a timestamp or carries the wrong
            number of values.
    """
    timeline = _default_section(payload, "timelineData")
    rows: List[Dict[str, Any]] = []
    for point in timeline:
        values = point.get("value")
        if "time" not in point or not isinstance(values, list):
            raise ParseError(f"Malformed timeline record: {point!r}")
        if len(values) != n_items:
            raise ParseError(
                f"Timeline record has {len(values)} value(s), "
                f"expected {n_items}")
        row: Dict[str, Any] = {
            "date": _to_int(point["time"], "timeline time"),
            "time_label": point.get("formattedTime", ""),
            "is_partial": bool(point.get("isPartial", False)),
        }
        formatted = point.get("formattedValue")
        has_data = point.get("hasData")
        for i, value in enumerate(values):
            row[f"hits_{i}"] = _to_int(value, "timeline value")
            row[f"low_{i}"] = _is_low_volume(_nth(formatted, i),
                                             _nth(has_data, i))
        rows.append(row)
    return pd.DataFrame(rows)


def wide_to_long(
    wide: pd.DataFrame,
    items: Sequence[ComparisonItem],
    gprop: str,
    category: int,
    hourly: bool,
) -> pd.DataFrame:
    """Reshape a wide time-series table into one row per (date, item).

    Args:
        wide: Output of :func:`timeline_to_wide`.
        items: Comparison items, in the order of the ``hits_<i>`` columns.
        gprop: Google product label for the ``gprop`` column.
        category: Category id for the ``category`` column.
        hourly: Keep full UTC timestamps when true; otherwise dates are
            normalized to midnight without a timezone.

    Returns:
        DataFrame with :data:`INTEREST_OVER_TIME_COLUMNS`.
    """
    if wide.empty:
        return empty_table(INTEREST_OVER_TIME_COLUMNS)

    long = pd.wide_to_long(
        wide,
        stubnames=["hits", "low"],
        i="date",
        j="item",
        sep="_",
    ).reset_index()

    long["keyword"] = long["item"].map(lambda i: items[i]["keyword"])
    long["geo"] = long["item"].map(lambda i: items[i]["geo"] or "world")
    long["time"] = long["item"].map(lambda i: items[i]["time"])
    long["gprop"] = gprop
    long["category"] = category
    long["low_volume"] = long["low"].astype(bool)
    long["hits"] = long["hits"].astype(int)

    dates = pd.to_datetime(long["date"], unit="s", utc=True)
    if not hourly:
        dates = dates.dt.tz_localize(None).dt.normalize()
    long["date"] = dates

    long = long.sort_values(["item", "date"], kind="stable")
    return long[INTEREST_OVER_TIME_COLUMNS].reset_index(drop=True)


def parse_interest_over_time(
    payload: Json,
    items: Sequence[ComparisonItem],
    gprop: str,
    category: int,
    hourly: bool,
) -> pd.DataFrame:
    """Parse a multiline payload into the ``interest_over_time`` table."""
    wide = timeline_to_wide(payload, len(items))
    return wide_to_long(wide, items, gprop, category, hourly)


def parse_geo_map(
    payload: Json,
    item: ComparisonItem,
    gprop: str,
    value_index: int = 0,
) -> pd.DataFrame:
    """Parse a comparedgeo payload into a region/DMA/city table.

    Args:
        payload: Decoded comparedgeo payload.
        item: The comparison item the widget belongs to.
        gprop: Google product label for the ``gprop`` column.
        value_index: Position of the item's value in each entry's
            ``value`` list.

    Returns:
        DataFrame with :data:`REGION_COLUMNS`; empty when the service
        has no data for this resolution.
    """
    records: List[RegionRow] = []
    for entry in _default_section(payload, "geoMapData"):
        value = _nth(entry.get("value"), value_index)
        if value is None:
            raise ParseError(f"Malformed geo map record: {entry!r}")
        records.append({
            "location": entry.get("geoName", ""),
            "geo_code": entry.get("geoCode", ""),
            "hits": _to_int(value, "geo map value"),
            "low_volume": _is_low_volume(
                _nth(entry.get("formattedValue"), value_index),
                _nth(entry.get("hasData"), value_index)),
            "keyword": item["keyword"],
            "geo": item["geo"] or "world",
            "gprop": gprop,
        })
    if not records:
        return empty_table(REGION_COLUMNS)
    return pd.DataFrame(records, columns=REGION_COLUMNS)


def _ranked_lists(payload: Json) -> List[List[Json]]:
    """Return the top and rising ``rankedKeyword`` lists, in that order."""
    ranked = _default_section(payload, "rankedList")
    lists = []
    for section in ranked[:len(SECTIONS)]:
        lists.append(_objects(section.get("rankedKeyword", []), "rankedKeyword"))
    return lists


def parse_related_topics(
    payload: Json,
    item: ComparisonItem,
    category: int,
) -> pd.DataFrame:
    """Parse a relatedsearches payload into the ``related_topics`` table.

    ``rankedList[0]`` holds the top topics, ``rankedList[1]`` the rising
    ones.
    """
    records: List[RelatedTopicRow] = []
    for section, entries in zip(SECTIONS, _ranked_lists(payload)):
        for entry in entries:
            topic = entry.get("topic")
            if not isinstance(topic, dict):
                raise ParseError(f"Related topic without 'topic': {entry!r}")
            records.append({
                "section": section,
                "topic_id": topic.get("mid", ""),
                "title": topic.get("title", ""),
                "topic_type": topic.get("type", ""),
                "value": _to_int(entry.get("value", 0), "ranked value"),
                "formatted_value": str(entry.get("formattedValue", "")),
                "keyword": item["keyword"],
                "geo": item["geo"] or "world",
                "category": category,
            })
    if not records:
        return empty_table(RELATED_TOPICS_COLUMNS)
    return pd.DataFrame(records, columns=RELATED_TOPICS_COLUMNS)


def parse_related_queries(
    payload: Json,
    item: ComparisonItem,
    category: int,
) -> pd.DataFrame:
    """Parse a relatedsearches payload into the ``related_queries`` table."""
    records: List[RelatedQueryRow] = []
    for section, entries in zip(SECTIONS, _ranked_lists(payload)):
        for entry in entries:
            if "query" not in entry:
                raise ParseError(f"Related query without 'query': {entry!r}")
            records.append({
                "section": section,
                "query": entry["query"],
                "value": _to_int(entry.get("value", 0), "ranked value"),
                "formatted_value": str(entry.get("formattedValue", "")),
                "keyword": item["keyword"],
                "geo": item["geo"] or "world",
                "category": category,
            })
    if not records:
        return empty_table(RELATED_QUERIES_COLUMNS)
    return pd.DataFrame(records, columns=RELATED_QUERIES_COLUMNS)
