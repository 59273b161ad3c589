"""Upload parsing: spreadsheets and survey exports into review records."""

import json
import logging
import string
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from ..core.constants import ErrorConstants, FileConstants
from ..core.errors import InvalidFileError
from ..core.models import ParsedRecord

logger = logging.getLogger(__name__)

_ALLOWED_CHARS = frozenset(string.printable + FileConstants.EXTRA_TEXT_CHARS)


def _upload_name(source: Any, filename: Optional[str]) -> str:
    if filename:
        return filename
    return str(getattr(source, "name", None) or source)


def parse_upload(source: Any, filename: Optional[str] = None) -> List[ParsedRecord]:
    """Parse an uploaded reviews file into normalized records.

    Args:
        source: Path or binary file-like object (e.g. a Streamlit upload)
        filename: Name used to pick the format when ``source`` has none

    Returns:
        Records numbered 0..N-1 in input order

    Raises:
        InvalidFileError: wrong file type, unreadable file, or no valid rows
    """
    ext = Path(_upload_name(source, filename)).suffix.lower()

    if ext in FileConstants.SPREADSHEET_EXTENSIONS:
        records = parse_spreadsheet(_read_sheet(source, ext))
    elif ext in FileConstants.SURVEY_EXTENSIONS:
        records = parse_survey(load_json(source))
    else:
        raise InvalidFileError(ErrorConstants.INVALID_FILE_TYPE)

    if not records:
        raise InvalidFileError(ErrorConstants.NO_VALID_REVIEWS)

    logger.info(f"Parsed {len(records)} reviews from {_upload_name(source, filename)}")
    return records


def _read_sheet(source: Any, ext: str) -> pd.DataFrame:
    try:
        if ext == ".csv":
            # extra fields (e.g. an unquoted comma in the text) are cut to the two used columns
            return pd.read_csv(source, header=None, dtype=object, skip_blank_lines=True,
                               engine="python", on_bad_lines=lambda fields: fields[:2])
        return pd.read_excel(source, sheet_name=0, header=None)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, ValueError, OSError) as e:
        logger.error(f"Failed to read spreadsheet: {e}")
        raise InvalidFileError(ErrorConstants.UNREADABLE_FILE) from e


def load_json(source: Any) -> Any:
    """Load a JSON document from a path or file-like object."""
    try:
        if hasattr(source, "read"):
            return json.load(source)
        with open(source, "r", encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.error(f"Failed to read JSON: {e}")
        raise InvalidFileError(ErrorConstants.UNREADABLE_FILE) from e


def _cell_to_str(value: Any, as_month: bool = False) -> str:
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%b") if as_month else value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def text_allowed(text: str) -> bool:
    """True when the text only holds printable ASCII and common punctuation."""
    return all(ch in _ALLOWED_CHARS for ch in text)


def parse_spreadsheet(df: pd.DataFrame) -> List[ParsedRecord]:
    """Turn a headered two-column sheet (text, month) into records."""
    records = []
    skipped = 0

    # first row is the header
    for _, row in df.iloc[1:].iterrows():
        cells = list(row)
        text = _cell_to_str(cells[0] if cells else None).strip()
        month = _cell_to_str(cells[1] if len(cells) > 1 else None, as_month=True).strip()

        if not text or not month or not text_allowed(text):
            skipped += 1
            continue

        records.append(ParsedRecord(id=len(records), text=text, month=month))

    if skipped:
        logger.info(f"Skipped {skipped} invalid spreadsheet rows")
    return records


def _clamp_rating(value: float) -> float:
    return max(0.0, min(5.0, float(value)))


def month_from_timestamp(value: Any) -> str:
    """3-letter month code for a survey ``createTime`` value, or ""."""
    if value is None or value == "":
        return ""
    if isinstance(value, dict):
        # Firestore-style {"_seconds": ..., "_nanoseconds": ...}
        value = value.get("_seconds", value.get("seconds"))
        if value is None:
            return ""
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            unit = "s" if abs(value) < 1e11 else "ms"
            stamp = pd.to_datetime(value, unit=unit, utc=True)
        else:
            stamp = pd.to_datetime(str(value), errors="coerce", utc=True)
    except (ValueError, OverflowError, TypeError):
        return ""
    if pd.isna(stamp):
        return ""
    return stamp.strftime("%b")


def _survey_entry(entry: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    responses = entry.get("surveyResponses")
    if not isinstance(responses, dict):
        return None

    rating = None
    parts = []
    for key, value in responses.items():
        is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
        if "rate" in str(key).lower() and is_number:
            if rating is None:
                rating = _clamp_rating(value)
            continue
        if isinstance(value, str) and value.strip():
            parts.append(value.strip())

    text = ". ".join(parts)
    month = month_from_timestamp(entry.get("createTime"))
    if not text or not month:
        return None

    return {"text": text, "month": month, "rating": rating}


def parse_survey(data: Any) -> List[ParsedRecord]:
    """Turn a survey export (JSON array) into records."""
    if not isinstance(data, list):
        raise InvalidFileError(ErrorConstants.UNREADABLE_FILE)

    records = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        fields = _survey_entry(entry)
        if fields is None:
            continue
        records.append(ParsedRecord(id=len(records), **fields))

    dropped = len(data) - len(records)
    if dropped:
        logger.info(f"Skipped {dropped} survey entries without text or date")
    return records
