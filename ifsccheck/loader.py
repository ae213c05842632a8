"""
loader.py - Input File Loader
==============================
This module loads the IFSC codes to check from an Excel (.xlsx, .xls) or
CSV file.

Input Layout:
-------------
By default the file has no header row and the first column holds the
codes, one per row:

    HDFC0CAGSBK
    SBIN0000001
    not-a-code

If a header row is configured (IFSC_INPUT_HEADER_ROW), the code column is
found by its normalized name ("IFSC", "IFSC Code", "ifsc_code", ...),
falling back to the first column.

Every row comes back as {'InputRow': n, 'IFSC': value}, where InputRow is
1-based and value is the raw cell text (None for a blank cell).
"""

import pandas as pd
from typing import List, Dict, Any
from pathlib import Path
import re


CODE_COLUMN = 'IFSC'

# Normalized header -> canonical column name
COLUMN_MAP = {
    'IFSC': CODE_COLUMN,
    'IFSCCODE': CODE_COLUMN,
    'CODE': CODE_COLUMN,
}


# =============================================================================
# COLUMN NAME NORMALIZATION
# =============================================================================

def normalize_header(header: str) -> str:
    """
    Standardize a column name by removing spaces/underscores and converting to uppercase.

    Examples:
        normalize_header("IFSC Code")  -> "IFSCCODE"
        normalize_header("ifsc_code")  -> "IFSCCODE"
    """
    normalized = re.sub(r'[\s_]+', '', header)
    return normalized.strip().upper()


def _read_frame(path: Path, header_row: int | None) -> pd.DataFrame:
    # dtype=str keeps codes like "0001234" intact instead of turning them into numbers
    if path.suffix == '.xlsx':
        return pd.read_excel(path, header=header_row, dtype=str, engine='openpyxl')
    if path.suffix == '.xls':
        # Legacy BIFF workbooks are only readable through xlrd
        return pd.read_excel(path, header=header_row, dtype=str, engine='xlrd')
    if path.suffix == '.csv':
        return pd.read_csv(path, header=header_row, dtype=str, skip_blank_lines=True)
    raise ValueError(
        f"Unsupported file type: {path.suffix}. "
        "Only .csv, .xlsx, and .xls files are supported."
    )


def _code_column(df: pd.DataFrame, header_row: int | None):
    if header_row is not None:
        for col in df.columns:
            if COLUMN_MAP.get(normalize_header(str(col))) == CODE_COLUMN:
                return col
    return df.columns[0]


# =============================================================================
# MAIN DATA LOADER
# =============================================================================

def load_input_data(filepath: str, header_row: int | None = None) -> List[Dict[str, Any]]:
    """
    Load the codes to check from an Excel or CSV file.

    Args:
        filepath: Path to the input file (.xlsx, .xls, or .csv)
        header_row: Row holding column headers (0-indexed), or None for no header

    Returns:
        One dict per non-empty row, in file order. Example: [
            {'InputRow': 1, 'IFSC': 'HDFC0CAGSBK'},
            {'InputRow': 2, 'IFSC': 'not-a-code'},
        ]

    Raises:
        FileNotFoundError: If the input file doesn't exist
        ValueError: If the file type is unsupported
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {filepath}")

    try:
        df = _read_frame(path, header_row)
    except pd.errors.EmptyDataError:
        # A CSV with no content at all
        return []

    if df.empty or len(df.columns) == 0:
        return []

    # Remove rows that are completely empty
    df.dropna(how='all', inplace=True)

    column = _code_column(df, header_row)
    codes = df[column].astype(object).where(df[column].notna(), None)

    return [
        {'InputRow': i, CODE_COLUMN: value.strip() if isinstance(value, str) else value}
        for i, value in enumerate(codes.tolist(), start=1)
    ]
