"""
CSV adapter for uploaded daily price files.
Parses Date,Open,High,Low,Close[,Volume] tables into canonical bars.
"""

import io
import logging
from pathlib import Path
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from analysis.models import DEFAULT_VOLUME, PricePoint
from ingestion.transforms.normalizers import normalize_prices

# Set up logger
logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['date', 'open', 'high', 'low', 'close']
OPTIONAL_COLUMNS = ['volume']
DATE_FORMAT = '%Y-%m-%d'


class IngestionError(Exception):
    """Raised when a price file cannot be turned into a usable series."""
    pass


def resolve_columns(header: List[str]) -> Dict[str, str]:
    """
    Map canonical column names to the file's header names.

    Matching is case-insensitive: an exact name wins, otherwise the first
    header containing the name (so "Close" beats "Adj Close").

    Args:
        header: Column names as they appear in the file

    Returns:
        Dictionary of canonical name -> file column name

    Raises:
        IngestionError: If a required column is missing
    """
    lowered = {col: col.strip().lower() for col in header}
    mapping = {}

    for name in REQUIRED_COLUMNS + OPTIONAL_COLUMNS:
        exact = [col for col, low in lowered.items() if low == name]
        partial = [col for col, low in lowered.items() if name in low]
        if exact:
            mapping[name] = exact[0]
        elif partial:
            mapping[name] = partial[0]

    missing = [name for name in REQUIRED_COLUMNS if name not in mapping]
    if missing:
        raise IngestionError(f"Missing required columns: {', '.join(missing)}")

    return mapping


def parse_price_frame(
    df: pd.DataFrame,
    default_volume: int = DEFAULT_VOLUME
) -> List[PricePoint]:
    """
    Convert a raw string DataFrame to canonical bars.

    Rows whose date or prices fail to parse are dropped.

    Raises:
        IngestionError: If required columns are missing or no valid rows remain
    """
    mapping = resolve_columns(list(df.columns))

    parsed = pd.DataFrame({
        'date': pd.to_datetime(df[mapping['date']], format=DATE_FORMAT, errors='coerce')
    })
    for name in ['open', 'high', 'low', 'close']:
        parsed[name] = pd.to_numeric(df[mapping[name]], errors='coerce')

    if 'volume' in mapping:
        # Non-finite volumes fall back to the default like empty cells
        parsed['volume'] = pd.to_numeric(df[mapping['volume']], errors='coerce').replace([np.inf, -np.inf], np.nan)
    else:
        parsed['volume'] = float('nan')

    valid = parsed[REQUIRED_COLUMNS].notna().all(axis=1)
    dropped = int((~valid).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} rows that failed date or numeric parsing")

    raw_rows = []
    for row in parsed[valid].to_dict('records'):
        raw_rows.append({
            'date': row['date'].date(),
            'open': row['open'],
            'high': row['high'],
            'low': row['low'],
            'close': row['close'],
            'volume': None if pd.isna(row['volume']) else int(row['volume'])
        })

    series = normalize_prices(raw_rows, default_volume=default_volume)
    if not series:
        raise IngestionError("No valid data rows found in CSV file")

    logger.info(f"Parsed {len(series)} bars ({series[0].date} to {series[-1].date})")
    return series


def parse_price_csv(text: str, default_volume: int = DEFAULT_VOLUME) -> List[PricePoint]:
    """
    Parse CSV text into bars sorted ascending by date.

    Args:
        text: CSV content with a header row
        default_volume: Volume used when the file has no volume column/value

    Returns:
        List of PricePoint

    Raises:
        IngestionError: If the CSV is empty, lacks required columns,
            or has no valid rows
    """
    if not text or not text.strip():
        raise IngestionError("CSV file must contain header and at least one data row")

    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise IngestionError(f"Failed to parse CSV file: {e}")

    return parse_price_frame(df, default_volume=default_volume)


def load_price_csv(
    path: Union[str, Path],
    default_volume: int = DEFAULT_VOLUME
) -> List[PricePoint]:
    """
    Load bars from a CSV file on disk.

    Raises:
        IngestionError: If the file is missing or unusable
    """
    csv_path = Path(path)
    if not csv_path.exists():
        raise IngestionError(f"CSV file not found: {csv_path}")

    text = csv_path.read_text(encoding='utf-8')
    logger.info(f"Loading prices from {csv_path}")
    return parse_price_csv(text, default_volume=default_volume)
