import json

import pytest

from gtrends.config import Settings


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.text = text
        self.status_code = status_code


class FakeSession:
    """Stand-in for ``requests.Session`` that records every GET.

    *routes* maps an URL suffix (``"explore"``, ``"multiline"``, ...) to a
    response, a list of responses consumed in order, or a callable
    ``(url, params) -> response``.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.headers = {}
        self.cookies = {}

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        for suffix, handler in self.routes.items():
            if url.endswith(suffix):
                if callable(handler):
                    return handler(url, params)
                if isinstance(handler, list):
                    return handler.pop(0)
                return handler
        raise AssertionError(f"Unexpected request to {url}")

    def calls_to(self, suffix):
        return [params for url, params in self.calls if url.endswith(suffix)]


def envelope(data, comma=True):
    """Wrap *data* the way the Trends API does."""
    prefix = ")]}'," if comma else ")]}'\n"
    return FakeResponse(prefix + json.dumps(data))


def make_widget(widget_id, request=None, token=None):
    return {
        "id": widget_id,
        "token": token or f"tok-{widget_id}",
        "request": request if request is not None else {},
        "title": widget_id.title(),
        "type": "fe_widget",
    }


def make_explore(n_items=1, single_keyword=True, resolution="WEEK"):
    """Explore payload with one TIMESERIES widget covering *n_items*."""
    widgets = [make_widget("TIMESERIES", {
        "time": "2021-01-01 2021-01-22",
        "resolution": resolution,
        "comparisonItem": [{"geo": {}} for _ in range(n_items)],
    })]
    widgets.append(make_widget("GEO_MAP", {"comparisonItem": []}))
    if n_items > 1:
        widgets.extend(
            make_widget(f"GEO_MAP_{i}", {"comparisonItem": [{}]})
            for i in range(n_items))
    if single_keyword:
        if n_items > 1:
            widgets.extend(make_widget(f"RELATED_TOPICS_{i}")
                           for i in range(n_items))
            widgets.extend(make_widget(f"RELATED_QUERIES_{i}")
                           for i in range(n_items))
        else:
            widgets.append(make_widget("RELATED_TOPICS"))
            widgets.append(make_widget("RELATED_QUERIES"))
    return {"widgets": widgets}


def make_timeline(values_by_date, start=1609459200, step=86400,
                  formatted=None):
    """Multiline payload; *values_by_date* is a list of per-date lists."""
    points = []
    for n, values in enumerate(values_by_date):
        point = {
            "time": str(start + n * step),
            "formattedTime": f"Point {n + 1}",
            "value": list(values),
            "hasData": [True] * len(values),
            "formattedValue": [str(v) for v in values],
        }
        if formatted and n in formatted:
            point["formattedValue"] = formatted[n]
        points.append(point)
    return {"default": {"timelineData": points, "averages": []}}


def make_geo_map(entries):
    """Comparedgeo payload from ``(name, code, value)`` tuples."""
    return {"default": {"geoMapData": [
        {
            "geoCode": code,
            "geoName": name,
            "value": [value],
            "formattedValue": ["<1" if value == 0 else str(value)],
            "hasData": [value > 0],
            "maxValueIndex": 0,
        }
        for name, code, value in entries
    ]}}


def make_related_topics(top, rising):
    def entries(rows):
        return [
            {"topic": {"mid": mid, "title": title, "type": kind},
             "value": value, "formattedValue": str(value),
             "hasData": True, "link": f"/trends/explore?q={mid}"}
            for mid, title, kind, value in rows
        ]
    return {"default": {"rankedList": [
        {"rankedKeyword": entries(top)},
        {"rankedKeyword": entries(rising)},
    ]}}


def make_related_queries(top, rising):
    def entries(rows):
        return [
            {"query": query, "value": value, "formattedValue": str(value),
             "hasData": True, "link": f"/trends/explore?q={query}"}
            for query, value in rows
        ]
    return {"default": {"rankedList": [
        {"rankedKeyword": entries(top)},
        {"rankedKeyword": entries(rising)},
    ]}}


@pytest.fixture
def settings():
    return Settings(base_url="https://trends.example.test", max_attempts=1)
