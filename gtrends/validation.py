"""Validate and normalize query parameters before any network call."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence, Tuple, Union

from gtrends import reference
from gtrends.errors import (
    InvalidArgument,
    InvalidCategory,
    InvalidGeo,
)
from gtrends.time_range import RollingRange, TimeSpec, parse_time
from gtrends.types import ComparisonItem

logger = logging.getLogger(__name__)

MAX_KEYWORDS: int = 5
MAX_GEOS: int = 5

StrOrSeq = Union[str, Sequence[str]]


class Gprop(Enum):
    """Google product the query is scoped to."""

    WEB = "web"
    NEWS = "news"
    IMAGES = "images"
    FROOGLE = "froogle"
    YOUTUBE = "youtube"

    @classmethod
    def parse(cls, value: Union[str, "Gprop"]) -> "Gprop":
        """Match *value* against the known products.

        ``"shopping"`` is accepted as an alias of ``froogle``.

        Raises:
            InvalidArgument: If *value* names no known product.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().lower()
            if name == "shopping":
                return cls.FROOGLE
            for member in cls:
                if member.value == name:
                    return member
        choices = ", ".join(m.value for m in cls)
        raise InvalidArgument(f"gprop must be one of {choices}; got {value!r}")

    @property
    def wire_value(self) -> str:
        """Value of the ``property`` field in the explore request."""
        return "" if self is Gprop.WEB else self.value


@dataclass(frozen=True)
class Query:
    """A validated, normalized parameter set."""

    keyword: Tuple[str, ...]
    geo: Tuple[str, ...]
    time: TimeSpec
    category: int
    gprop: Gprop
    hl: str

    @property
    def comparison_items(self) -> List[ComparisonItem]:
        """Pair keyword and geo elementwise, recycling the shorter one."""
        n = max(len(self.keyword), len(self.geo))
        return [
            {
                "keyword": self.keyword[i % len(self.keyword)],
                "geo": self.geo[i % len(self.geo)],
                "time": self.time.raw,
            }
            for i in range(n)
        ]

    @property
    def single_keyword(self) -> bool:
        return len(self.keyword) == 1


def validate_query(
    keyword: StrOrSeq,
    geo: StrOrSeq = "",
    time: Union[str, RollingRange] = "today+5-y",
    gprop: Union[str, Gprop] = "web",
    category: Union[int, Sequence[int]] = 0,
    hl: str = "en-US",
) -> Query:
    """Validate raw query parameters.

    Checks run in a fixed order and the first failure is raised:

    1. keyword/geo length compatibility (one divides the other),
    2. at most five keywords and five geos,
    3. the time grammar,
    4. the ``hl`` language code,
    5. geo codes against the country/subdivision table,
    6. the category against the category table,
    7. the Google product.

    Args:
        keyword: One keyword or a sequence of up to five.
        geo: One geo code or a sequence of up to five; ``""`` means
            worldwide.
        time: Time-range string, see :mod:`gtrends.time_range`, or a
            :class:`~gtrends.time_range.RollingRange`.
        gprop: Google product (``web``, ``news``, ``images``,
            ``froogle``/``shopping`` or ``youtube``).
        category: Category id, or a one-element sequence of one.
        hl: Interface language, used for related-topic titles.

    Returns:
        The normalized :class:`Query`.

    Raises:
        InvalidArgument: Malformed keyword/geo/hl/gprop/category input.
        InvalidTimeFormat: *time* matches no accepted shape.
        InvalidGeo: A geo code is unknown.
        InvalidCategory: A category id is unknown.
    """
    keywords = _as_tuple(keyword, "keyword")
    geos = _as_tuple(geo, "geo")

    if not keywords:
        raise InvalidArgument("At least one keyword is required")
    if not geos:
        geos = ("",)
    if len(keywords) % len(geos) != 0 and len(geos) % len(keywords) != 0:
        raise InvalidArgument(
            f"keyword ({len(keywords)}) and geo ({len(geos)}) lengths must "
            f"be multiples of one another")

    if len(keywords) > MAX_KEYWORDS:
        raise InvalidArgument(
            f"At most {MAX_KEYWORDS} keywords are allowed, got {len(keywords)}")
    if len(geos) > MAX_GEOS:
        raise InvalidArgument(
            f"At most {MAX_GEOS} geos are allowed, got {len(geos)}")

    time_spec = parse_time(time)

    if not isinstance(hl, str) or hl not in reference.language_codes():
        raise InvalidArgument(f"Language code not valid: {hl!r}")

    known_geos = reference.geo_codes()
    for code in geos:
        if code and code not in known_geos:
            raise InvalidGeo(
                f"Country code not valid: {code!r}. "
                f"See gtrends.reference.countries() for valid codes.")

    category_id = _validate_category(category)
    product = Gprop.parse(gprop)

    query = Query(keyword=keywords, geo=geos, time=time_spec,
                  category=category_id, gprop=product, hl=hl)
    logger.debug("Validated query: %s", query)
    return query


def _as_tuple(value: StrOrSeq, name: str) -> Tuple[str, ...]:
    """Accept a single string or a sequence of strings as a tuple."""
    if isinstance(value, str):
        return (value,)
    try:
        items = tuple(value)
    except TypeError as exc:
        raise InvalidArgument(
            f"{name} must be a string or a sequence of strings") from exc
    for item in items:
        if not isinstance(item, str):
            raise InvalidArgument(
                f"{name} entries must be strings, got {item!r}")
    return items


def _validate_category(category: Union[int, Sequence[int]]) -> int:
    """Check every category entry and return the single id to query.

    Each entry is checked on its own so the error names the exact id
    that failed.
    """
    if isinstance(category, (str, int)) or not hasattr(category, "__iter__"):
        entries = [category]
    else:
        entries = list(category)
    if not entries:
        raise InvalidArgument("category must not be empty")

    known = reference.category_ids()
    ids = []
    for entry in entries:
        try:
            cat_id = int(entry)
        except (TypeError, ValueError) as exc:
            raise InvalidCategory(f"Category code not valid: {entry!r}") from exc
        # int() truncates 20.9 to 20
        integral = isinstance(entry, str) or cat_id == entry
        if isinstance(entry, bool) or not integral or cat_id not in known:
            raise InvalidCategory(
                f"Category code not valid: {entry!r}. "
                f"See gtrends.reference.categories() for valid codes.")
        ids.append(cat_id)

    if len(set(ids)) > 1:
        raise InvalidArgument(
            f"Only one category can be queried at a time, got {ids}")
    return ids[0]
