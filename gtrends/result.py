"""The composite result of one Trends query."""

from dataclasses import dataclass, fields
from typing import ClassVar, Dict

import pandas as pd


@dataclass(frozen=True)
class GtrendsResult:
    """Six tables produced by :func:`gtrends.gtrends`.

    The class-level ``kind`` tag lets rendering code dispatch on the
    result type without importing this class.
    """

    kind: ClassVar[str] = "gtrends"

    interest_over_time: pd.DataFrame
    interest_by_region: pd.DataFrame
    interest_by_dma: pd.DataFrame
    interest_by_city: pd.DataFrame
    related_topics: pd.DataFrame
    related_queries: pd.DataFrame

    def tables(self) -> Dict[str, pd.DataFrame]:
        """Return the tables keyed by name, in declaration order."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def __repr__(self) -> str:
        sizes = ", ".join(f"{name}={len(df)}" for name, df in self.tables().items())
        return f"GtrendsResult({sizes})"
