"""Static reference tables shipped with the package.

The tables are read once from ``gtrends/data`` on first use and kept for
the lifetime of the process.  Accessors hand out copies so callers can
never mutate the cached data.
"""

from functools import lru_cache
from importlib import resources
from typing import FrozenSet

import pandas as pd

_DATA_PACKAGE = "gtrends.data"


def _read_table(name: str, **kwargs) -> pd.DataFrame:
    """Read one CSV from the data package.

    ``keep_default_na=False`` keeps Namibia's code ``"NA"`` a string.
    """
    with resources.files(_DATA_PACKAGE).joinpath(name).open(
            "r", encoding="utf-8") as fh:
        return pd.read_csv(fh, keep_default_na=False, **kwargs)


@lru_cache(maxsize=None)
def _countries() -> pd.DataFrame:
    """Countries and their ISO 3166-2 subdivisions."""
    return _read_table("countries.csv", dtype=str)


@lru_cache(maxsize=None)
def _categories() -> pd.DataFrame:
    """The category tree, one row per (id, parent) edge."""
    return _read_table("categories.csv", dtype={"id": int, "name": str,
                                                "parent_id": str})


@lru_cache(maxsize=None)
def _languages() -> pd.DataFrame:
    """Interface languages accepted as ``hl``."""
    return _read_table("languages.csv", dtype=str)


@lru_cache(maxsize=None)
def geo_codes() -> FrozenSet[str]:
    """Return every accepted geo code (countries and subdivisions)."""
    df = _countries()
    subs = df.loc[df["sub_code"] != "", "sub_code"]
    return frozenset(df["country_code"]) | frozenset(subs)


@lru_cache(maxsize=None)
def category_ids() -> FrozenSet[int]:
    """Return every accepted category id."""
    return frozenset(int(i) for i in _categories()["id"])


@lru_cache(maxsize=None)
def language_codes() -> FrozenSet[str]:
    """Return every accepted ``hl`` language code."""
    return frozenset(_languages()["code"])


def countries() -> pd.DataFrame:
    """Country and subdivision table (``country_code, sub_code, name``)."""
    return _countries().copy()


def categories() -> pd.DataFrame:
    """Category table (``id, name, parent_id``)."""
    return _categories().copy()


def languages() -> pd.DataFrame:
    """Language table (``code, name``)."""
    return _languages().copy()
