"""Runtime settings for talking to the Trends service.

Defaults suit interactive use.  Deployments can override any of them
through ``GTRENDS_*`` environment variables via :meth:`Settings.from_env`.
"""

import os
from dataclasses import dataclass

from gtrends.errors import InvalidArgument

DEFAULT_BASE_URL: str = "https://trends.google.com"
DEFAULT_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Settings:
    """Connection settings shared by every request of one query.

    Attributes:
        base_url: Scheme and host of the Trends service.
        tz: Timezone offset in minutes sent as the ``tz`` parameter
            (Google's sign convention: 360 is UTC-6).
        timeout: Per-request timeout in seconds.
        max_attempts: Attempts per request, including the first one.
            ``1`` disables retries.
        user_agent: ``User-Agent`` header for a freshly opened session.
    """

    base_url: str = DEFAULT_BASE_URL
    tz: int = 360
    timeout: float = 30.0
    max_attempts: int = 3
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def api_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/trends/api"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``GTRENDS_*`` environment variables.

        Unset variables keep their defaults.

        Returns:
            A populated :class:`Settings`.

        Raises:
            InvalidArgument: If a numeric variable cannot be parsed or
                ``GTRENDS_MAX_ATTEMPTS`` is below 1.
        """
        defaults = cls()
        max_attempts = _env_number("GTRENDS_MAX_ATTEMPTS", int,
                                   defaults.max_attempts)
        if max_attempts < 1:
            raise InvalidArgument("GTRENDS_MAX_ATTEMPTS must be at least 1")
        return cls(
            base_url=os.getenv("GTRENDS_BASE_URL", defaults.base_url),
            tz=_env_number("GTRENDS_TZ", int, defaults.tz),
            timeout=_env_number("GTRENDS_TIMEOUT", float, defaults.timeout),
            max_attempts=max_attempts,
            user_agent=os.getenv("GTRENDS_USER_AGENT", defaults.user_agent),
        )


def _env_number(name, kind, default):
    """Read a numeric environment variable, falling back to *default*.

    Raises:
        InvalidArgument: If the variable is set but *kind* rejects it.
    """
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return kind(raw)
    except ValueError as exc:
        raise InvalidArgument(f"{name} must be a number, got {raw!r}") from exc
