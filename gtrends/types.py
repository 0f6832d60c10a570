"""Shared type aliases and typed dictionaries for the gtrends package."""

from typing import Any, Dict, List, TypedDict

Json = Dict[str, Any]
"""A JSON-like dictionary with string keys and arbitrary values."""


class ComparisonItem(TypedDict):
    """One (keyword, geo, time) row evaluated jointly by the service."""

    keyword: str
    geo: str
    time: str


class ExploreRequest(TypedDict):
    """The ``req`` payload sent to the explore endpoint."""

    comparisonItem: List[ComparisonItem]
    category: int
    property: str


class Widget(TypedDict, total=False):
    """A single widget returned by the explore endpoint."""

    id: str
    token: str
    request: Json
    title: str
    type: str


class TimelinePoint(TypedDict, total=False):
    """A single record of ``default.timelineData`` (multiline endpoint)."""

    time: str
    formattedTime: str
    formattedAxisTime: str
    value: List[int]
    hasData: List[bool]
    formattedValue: List[str]
    isPartial: bool


class GeoMapEntry(TypedDict, total=False):
    """A single record of ``default.geoMapData`` (comparedgeo endpoint)."""

    geoCode: str
    geoName: str
    value: List[int]
    formattedValue: List[str]
    hasData: List[bool]
    maxValueIndex: int


class Topic(TypedDict, total=False):
    """The ``topic`` object of a related-topics entry."""

    mid: str
    title: str
    type: str


class RankedKeyword(TypedDict, total=False):
    """A single entry of a ``rankedList`` (relatedsearches endpoint)."""

    query: str
    topic: Topic
    value: int
    formattedValue: str
    hasData: bool
    link: str


class InterestOverTimeRow(TypedDict):
    """A row of the ``interest_over_time`` table."""

    date: Any
    hits: int
    keyword: str
    geo: str
    time: str
    time_label: str
    gprop: str
    category: int
    low_volume: bool
    is_partial: bool


class RegionRow(TypedDict):
    """A row of the ``interest_by_region``/``dma``/``city`` tables."""

    location: str
    geo_code: str
    hits: int
    low_volume: bool
    keyword: str
    geo: str
    gprop: str


class RelatedTopicRow(TypedDict):
    """A row of the ``related_topics`` table."""

    section: str
    topic_id: str
    title: str
    topic_type: str
    value: int
    formatted_value: str
    keyword: str
    geo: str
    category: int


class RelatedQueryRow(TypedDict):
    """A row of the ``related_queries`` table."""

    section: str
    query: str
    value: int
    formatted_value: str
    keyword: str
    geo: str
    category: int
