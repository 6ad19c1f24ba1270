"""
CSV Parsing Service

Turns uploaded CSV content into assignment records. Each data row carries
four fields: EmployeeID, ProjectID, DateFrom, DateTo. An optional header row
is detected on the first non-blank line only. DateTo may be blank or NULL for
assignments that are still running.

Parsing stops at the first bad line and raises ParseError with its line number.
"""

import csv
from datetime import date, datetime

from dateutil import parser as date_parser

from core.errors import ParseError
from models.assignments import AssignmentInterval


# =============================================================================
# CONSTANTS
# =============================================================================

# Tried in order, first match wins
DATE_FORMATS = [
    "%Y-%m-%d",  # yyyy-MM-dd
    "%m/%d/%Y",  # MM/dd/yyyy
    "%d/%m/%Y",  # dd/MM/yyyy
    "%Y/%m/%d",  # yyyy/MM/dd
    "%d-%m-%Y",  # dd-MM-yyyy
    "%m-%d-%Y",  # MM-dd-yyyy
    "%d.%m.%Y",  # dd.MM.yyyy
    "%Y.%m.%d",  # yyyy.MM.dd
    "%Y%m%d",  # yyyyMMdd
    "%b %d, %Y",  # MMM dd, yyyy
    "%d %b %Y",  # dd MMM yyyy
    "%B %d, %Y",  # MMMM dd, yyyy
    "%d %B %Y",  # dd MMMM yyyy
]

OPEN_END_TOKEN = "NULL"
EXPECTED_FIELDS = 4
BOM = "\ufeff"

# The fallback fills missing parts from these; a date is only complete if
# both parses agree
FALLBACK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


# =============================================================================
# FIELD PARSING
# =============================================================================


def parse_date(value: str) -> date | None:
    """
    Parse a date string using the accepted formats, then a generic fallback.

    Returns None if the value is blank or no format matches.
    """
    value = value.strip()
    if not value:
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    try:
        first, second = (
            date_parser.parse(value, default=default).date() for default in FALLBACK_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None

    if first != second:
        return None
    return first


def _parse_int(value: str) -> int | None:
    value = value.strip()
    if not value or "_" in value or not value.isascii():
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    if not INT32_MIN <= number <= INT32_MAX:
        return None
    return number


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line, honouring double quotes and "" escapes."""
    return next(csv.reader([line], skipinitialspace=True), [""])


def is_header_row(fields: list[str]) -> bool:
    """A row is a header if its first two fields are not both integers."""
    if len(fields) < 2:
        return False
    return _parse_int(fields[0]) is None or _parse_int(fields[1]) is None


def parse_record(fields: list[str]) -> AssignmentInterval:
    """
    Build an AssignmentInterval from the four fields of a data row.

    Raises:
        ValueError: with a human-readable reason if any field is invalid
    """
    if len(fields) != EXPECTED_FIELDS:
        raise ValueError(f"Expected {EXPECTED_FIELDS} fields but found {len(fields)}")

    employee_id = _parse_int(fields[0])
    if employee_id is None:
        raise ValueError(f"Invalid Employee ID: '{fields[0]}'")

    project_id = _parse_int(fields[1])
    if project_id is None:
        raise ValueError(f"Invalid Project ID: '{fields[1]}'")

    date_from_str = fields[2].strip()
    date_from = parse_date(date_from_str)
    if date_from is None:
        raise ValueError(f"Invalid DateFrom format: '{date_from_str}'")

    date_to = None
    date_to_str = fields[3].strip()
    if date_to_str and date_to_str.upper() != OPEN_END_TOKEN:
        date_to = parse_date(date_to_str)
        if date_to is None:
            raise ValueError(f"Invalid DateTo format: '{date_to_str}'")

    if date_to is not None and date_to < date_from:
        raise ValueError("DateTo cannot be earlier than DateFrom")

    return AssignmentInterval(
        employee_id=employee_id,
        project_id=project_id,
        start_date=date_from,
        end_date=date_to,
    )


# =============================================================================
# DOCUMENT PARSING
# =============================================================================


def split_lines(text: str) -> list[str]:
    """Split text into physical lines; only \\r\\n, \\r and \\n end a line."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def parse_assignments(text: str) -> list[AssignmentInterval]:
    """
    Parse CSV text into assignment records.

    Blank lines are skipped but still counted for line numbers.

    Raises:
        ParseError: on the first line that cannot be parsed
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    lines = split_lines(text)

    records = []
    header_checked = False

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue

        try:
            fields = split_csv_line(line)
        except csv.Error as e:
            raise ParseError(line_number, str(e)) from e

        if not header_checked:
            header_checked = True
            if is_header_row(fields):
                continue

        try:
            records.append(parse_record(fields))
        except ValueError as e:
            raise ParseError(line_number, str(e)) from e

    return records


def parse_assignments_bytes(data: bytes) -> list[AssignmentInterval]:
    """
    Decode UTF-8 upload content and parse it.

    Raises:
        ParseError: if the content is not valid UTF-8 or a line is invalid
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        line_number = len(split_lines(data[: e.start].decode("utf-8")))
        raise ParseError(line_number, f"File is not valid UTF-8 text ({e.reason})") from e
    return parse_assignments(text)
