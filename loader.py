"""Reading the patient records CSV.

This is the only place where a load failure is an error: values are read as
plain text and left for ``preprocessing`` to coerce.
"""

import logging
from pathlib import Path

import pandas as pd

from preprocessing import RECOGNIZED_COLUMNS

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The dataset file is missing, unreadable or has no usable header."""


def read_records(path: str | Path) -> pd.DataFrame:
    """Read a CSV with a header row, every value as a string ("" when empty)."""
    path = Path(path)
    logger.info(f"Loading data from {path}")

    if not path.is_file():
        raise DataLoadError(f"Dataset not found: {path}")

    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(f"Dataset is empty: {path}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise DataLoadError(f"Could not parse {path}: {exc}") from exc

    frame.columns = [str(column).strip() for column in frame.columns]
    recognized = [column for column in frame.columns if column in RECOGNIZED_COLUMNS]
    if not recognized:
        raise DataLoadError(
            f"{path} has none of the expected columns; is the header row missing?"
        )

    logger.info(f"Loaded {len(frame)} records with {len(frame.columns)} columns")
    return frame
