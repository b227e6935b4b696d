"""
Spreadsheet file loading and CSV export.

This module handles the tabular file boundary:
- CSV files (UTF-8, with or without byte-order mark)
- Excel files (.xlsx, .xls)

Both are decoded into rows of strings. Exports are CSV bytes prefixed with a
UTF-8 byte-order mark so spreadsheet applications detect the encoding.
"""

import csv
import io
from pathlib import Path
from typing import Optional, Sequence, Union

import pandas as pd


class SpreadsheetLoadError(Exception):
    """Raised when a spreadsheet file cannot be read."""
    pass


UTF8_BOM = "\ufeff"

Rows = list[list[str]]


def decode_csv_rows(data: Union[bytes, str]) -> Rows:
    """
    Decode CSV content into rows of strings.

    Args:
        data: Raw CSV bytes or text. A leading byte-order mark is ignored.

    Returns:
        Rows as lists of cell strings. Rows keep their own length.

    Raises:
        SpreadsheetLoadError: If the content is not valid UTF-8 CSV.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise SpreadsheetLoadError(f"CSV file is not UTF-8 encoded: {e}")
    else:
        text = data.lstrip(UTF8_BOM)

    try:
        return [list(row) for row in csv.reader(io.StringIO(text, newline=""))]
    except csv.Error as e:
        raise SpreadsheetLoadError(f"Failed to parse CSV content: {e}")


def load_csv_rows(file_path: Union[str, Path]) -> Rows:
    """
    Load rows from a CSV file.

    Raises:
        SpreadsheetLoadError: If the file is missing or cannot be parsed.
    """
    path = Path(file_path)

    if not path.exists():
        raise SpreadsheetLoadError(f"File not found: {file_path}")

    return decode_csv_rows(path.read_bytes())


def load_excel_rows(source: Union[str, Path, bytes], sheet_name: Optional[str] = None) -> Rows:
    """
    Load rows from an Excel workbook, reading every cell as text.

    Args:
        source: Path to the workbook, or its raw bytes.
        sheet_name: Optional sheet name to read from. Defaults to first sheet.

    Returns:
        Rows as lists of cell strings, with trailing empty cells removed.

    Raises:
        SpreadsheetLoadError: If the workbook cannot be read.
    """
    if isinstance(source, bytes):
        handle = io.BytesIO(source)
    else:
        handle = Path(source)
        if not handle.exists():
            raise SpreadsheetLoadError(f"File not found: {source}")

    try:
        df = pd.read_excel(
            handle,
            sheet_name=sheet_name or 0,
            header=None,
            dtype=str,
            keep_default_na=False,
        )
    except Exception as e:
        raise SpreadsheetLoadError(f"Failed to read Excel file: {e}")

    rows: Rows = []
    for values in df.itertuples(index=False, name=None):
        row = ["" if pd.isna(v) else str(v) for v in values]
        while row and row[-1] == "":
            row.pop()
        rows.append(row)
    return rows


def load_rows(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> Rows:
    """
    Load template rows from a CSV or Excel file.

    Automatically detects file type based on extension.

    Raises:
        SpreadsheetLoadError: If the file cannot be read or the format is unsupported.
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".csv":
        return load_csv_rows(path)
    elif suffix in (".xlsx", ".xls"):
        return load_excel_rows(path, sheet_name)
    else:
        raise SpreadsheetLoadError(
            f"Unsupported file format: {suffix}. Supported formats: .csv, .xlsx, .xls"
        )


def encode_csv(rows: Sequence[Sequence[str]]) -> bytes:
    """
    Encode rows as CSV bytes with a UTF-8 byte-order mark.

    Quoting of delimiters, quotes and newlines is left to the csv module.
    """
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerows(rows)
    return (UTF8_BOM + buffer.getvalue()).encode("utf-8")


def decode_rows(data: bytes, filename: str, sheet_name: Optional[str] = None) -> Rows:
    """
    Decode an uploaded template into rows, using the file name to pick the format.

    Raises:
        SpreadsheetLoadError: If the content cannot be read or the format is unsupported.
    """
    suffix = Path(filename or "").suffix.lower()

    if suffix == ".csv":
        return decode_csv_rows(data)
    elif suffix in (".xlsx", ".xls"):
        return load_excel_rows(data, sheet_name)
    else:
        raise SpreadsheetLoadError(
            f"Unsupported file format: {suffix or filename}. Supported formats: .csv, .xlsx, .xls"
        )
