"""HTTP access to the Trends API with envelope parsing and retries.

Every Trends API response body starts with the anti-scraping prefix
``)]}'`` (the widgetdata endpoints add a trailing comma).  The prefix is
stripped deterministically; any other body is a :class:`ParseError`.

Transient failures (rate limits, timeouts, network blips) are retried
with exponential backoff so that a single flaky call doesn't fail the
whole query.
"""

import json
import logging
import random
from typing import Any, Dict, Optional

import requests
from requests.exceptions import (
    ChunkedEncodingError,
    ConnectionError,
    RequestException,
    Timeout,
)
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from gtrends.config import Settings
from gtrends.errors import ParseError, RemoteError, TransientRemoteError
from gtrends.types import Json

logger = logging.getLogger(__name__)

ANTI_SCRAPING_PREFIX: str = ")]}'"

# HTTP status codes that are safe to retry.
_TRANSIENT_STATUS_CODES = {429, 500, 502, 503, 504}


def open_session(
    settings: Settings,
    session: Optional[Any] = None,
    wait: Optional[Any] = None,
) -> Any:
    """Open a session carrying the cookies the API insists on.

    The Trends API answers 429 to requests without an ``NID`` cookie, so
    the home page is fetched once to obtain it.  That request goes
    through the same retry policy as :func:`get_json`.

    Args:
        settings: Connection settings.
        session: Session to prime; a new :class:`requests.Session` when
            omitted.
        wait: tenacity wait strategy; defaults to exponential backoff
            with jitter.

    Returns:
        The primed session.

    Raises:
        RemoteError: If the home page answers with a non-2xx status once
            all retry attempts are exhausted.
    """
    if session is None:
        session = requests.Session()
    session.headers.update({
        "User-Agent": settings.user_agent,
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
    })
    url = f"{settings.base_url.rstrip('/')}/trends/explore"
    _send(session, url, None, settings, wait)
    logger.debug("Session opened with cookies: %s",
                 sorted(session.cookies.keys()))
    return session


def strip_prefix(text: str) -> str:
    """Remove the anti-scraping prefix from a response body.

    Args:
        text: Raw response body.

    Returns:
        The JSON document that follows the prefix.

    Raises:
        ParseError: If the body does not start with the prefix.
    """
    if not text.startswith(ANTI_SCRAPING_PREFIX):
        raise ParseError(
            f"Response does not start with {ANTI_SCRAPING_PREFIX!r}: "
            f"{text[:40]!r}")
    body = text[len(ANTI_SCRAPING_PREFIX):]
    if body.startswith(","):
        body = body[1:]
    return body


def parse_envelope(text: str) -> Json:
    """Strip the prefix and decode the JSON object behind it.

    Raises:
        ParseError: If the prefix is missing or the rest is not a JSON
            object.
    """
    try:
        data = json.loads(strip_prefix(text))
    except json.JSONDecodeError as exc:
        raise ParseError(f"Failed to parse response: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object, got {type(data).__name__}")
    return data


def _check_status(response: Any, url: str) -> None:
    """Translate a non-2xx status into the matching exception type.

    Raises:
        TransientRemoteError: On 429 and 5xx statuses (retryable).
        RemoteError: On any other non-2xx status.
    """
    status = response.status_code
    if 200 <= status < 300:
        return
    message = f"HTTP {status} from {url}"
    if status in _TRANSIENT_STATUS_CODES:
        raise TransientRemoteError(message, status_code=status, url=url)
    raise RemoteError(message, status_code=status, url=url)


def _add_jitter(retry_state):
    """Compute wait time: exponential backoff (1s..30s, x2) + 0-1s random jitter.

    Args:
        retry_state: The current retry state provided by tenacity.

    Returns:
        Wait time in seconds.
    """
    exp_wait = wait_exponential(multiplier=1, min=1, max=30)
    return exp_wait(retry_state) + random.uniform(0, 1)


def _log_retry(retry_state) -> None:
    """Log the failed attempt before tenacity sleeps and tries again."""
    url = retry_state.args[1]
    logger.warning("Attempt %d for %s failed (%s), retrying",
                   retry_state.attempt_number, url,
                   retry_state.outcome.exception())


def _retrying(settings: Settings, wait: Optional[Any]) -> Retrying:
    """Build the retry policy shared by every request."""
    return Retrying(
        retry=retry_if_exception_type(
            (ConnectionError, Timeout, ChunkedEncodingError,
             TransientRemoteError)
        ),
        stop=stop_after_attempt(settings.max_attempts),
        wait=wait if wait is not None else _add_jitter,
        before_sleep=_log_retry,
        reraise=True,
    )


def _get(
    session: Any,
    url: str,
    params: Optional[Dict[str, Any]],
    settings: Settings,
) -> Any:
    """Issue one GET and fail on a non-2xx status."""
    logger.debug("GET %s params=%s", url, params)
    response = session.get(url, params=params, timeout=settings.timeout)
    _check_status(response, url)
    return response


def _send(
    session: Any,
    url: str,
    params: Optional[Dict[str, Any]],
    settings: Settings,
    wait: Optional[Any],
) -> Any:
    """GET *url* under the retry policy and return the 2xx response.

    Raises:
        RemoteError: Non-2xx status, or a connection error, timeout or
            broken stream once all retry attempts are exhausted.
    """
    try:
        return _retrying(settings, wait)(_get, session, url, params, settings)
    except RequestException as exc:
        raise RemoteError(f"Request to {url} failed: {exc}", url=url) from exc


def get_json(
    session: Any,
    url: str,
    params: Dict[str, Any],
    settings: Settings,
    wait: Optional[Any] = None,
) -> Json:
    """GET *url* and return the decoded JSON envelope.

    Args:
        session: A :class:`requests.Session` (or compatible object).
        url: Endpoint URL.
        params: Query-string parameters.
        settings: Connection settings (timeout, attempts).
        wait: tenacity wait strategy; defaults to exponential backoff
            with jitter.

    Returns:
        The JSON object behind the anti-scraping prefix.

    Raises:
        RemoteError: Non-2xx status, or a connection error, timeout or
            broken stream once all retry attempts are exhausted.
        ParseError: Body does not match the expected envelope.
    """
    response = _send(session, url, params, settings, wait)
    return parse_envelope(response.text)
