"""Exchange a validated query for widget tokens (explore endpoint)."""

import json
import logging
from typing import Any, List

from gtrends.config import Settings
from gtrends.errors import ParseError
from gtrends.transport import get_json
from gtrends.types import ExploreRequest, Widget
from gtrends.validation import Query

logger = logging.getLogger(__name__)

TIMESERIES = "TIMESERIES"
GEO_MAP = "GEO_MAP"
RELATED_TOPICS = "RELATED_TOPICS"
RELATED_QUERIES = "RELATED_QUERIES"


def build_explore_request(query: Query) -> ExploreRequest:
    """Build the ``req`` payload for the explore endpoint."""
    return {
        "comparisonItem": query.comparison_items,
        "category": query.category,
        "property": query.gprop.wire_value,
    }


def get_widgets(session: Any, query: Query, settings: Settings) -> List[Widget]:
    """Fetch the widgets describing every sub-query of *query*.

    Args:
        session: HTTP session used for the request.
        query: The validated query.
        settings: Connection settings.

    Returns:
        The widget list, in the order the service returned it.

    Raises:
        RemoteError: On a non-2xx response.
        ParseError: If the envelope is malformed or has no widget list.
    """
    params = {
        "hl": query.hl,
        "tz": settings.tz,
        "req": json.dumps(build_explore_request(query)),
    }
    logger.info("Requesting widgets for %s (%s)",
                ", ".join(query.keyword), query.time.raw)
    data = get_json(session, f"{settings.api_url}/explore", params, settings)

    widgets = data.get("widgets")
    if not isinstance(widgets, list):
        raise ParseError("Explore response has no 'widgets' list")
    for widget in widgets:
        if not isinstance(widget, dict) or "id" not in widget \
                or "token" not in widget or "request" not in widget:
            raise ParseError(f"Malformed widget in explore response: {widget!r}")

    logger.info("Received %d widget(s): %s", len(widgets),
                ", ".join(w["id"] for w in widgets))
    return widgets


def select_widgets(widgets: List[Widget], prefix: str) -> List[Widget]:
    """Return the widgets whose id is *prefix* or ``<prefix>_<n>``."""
    return [
        w for w in widgets
        if w["id"] == prefix or w["id"].startswith(f"{prefix}_")
    ]
