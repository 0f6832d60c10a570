"""Write the tables of a query result to CSV files."""

import logging
from pathlib import Path
from typing import List, Union

from gtrends.result import GtrendsResult

logger = logging.getLogger(__name__)


def write_result_csv(
    result: GtrendsResult,
    output_dir: Union[str, Path],
    prefix: str = "",
) -> List[Path]:
    """Write every non-empty table of *result* to ``<prefix><name>.csv``.

    Missing parent directories are created.  Empty tables (e.g. related
    topics for a multi-keyword query) are skipped with a warning, and an
    existing file with the same name is overwritten.

    Args:
        result: The query result to export.
        output_dir: Destination directory.
        prefix: Optional file-name prefix, e.g. ``"nhl_"``.

    Returns:
        The paths that were written, in table order.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written: List[Path] = []
    for name, df in result.tables().items():
        if df.empty:
            logger.warning("Table %s is empty, skipping CSV output.", name)
            continue
        path = output_dir / f"{prefix}{name}.csv"
        df.to_csv(path, index=False)
        logger.info("Wrote %d rows to %s", len(df), path)
        written.append(path)
    return written
