"""Tests for the CSV parsing service."""

from datetime import date

import pytest

from core.errors import ParseError
from models.assignments import AssignmentInterval
from services.csv_parser import (
    is_header_row,
    parse_assignments,
    parse_assignments_bytes,
    parse_date,
    split_csv_line,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2013-11-01", date(2013, 11, 1)),  # yyyy-MM-dd
        ("11/01/2013", date(2013, 11, 1)),  # MM/dd/yyyy
        ("25/11/2013", date(2013, 11, 25)),  # dd/MM/yyyy
        ("2013/11/01", date(2013, 11, 1)),  # yyyy/MM/dd
        ("25-11-2013", date(2013, 11, 25)),  # dd-MM-yyyy
        ("11-25-2013", date(2013, 11, 25)),  # MM-dd-yyyy
        ("01.11.2013", date(2013, 11, 1)),  # dd.MM.yyyy
        ("2013.11.01", date(2013, 11, 1)),  # yyyy.MM.dd
        ("20131101", date(2013, 11, 1)),  # yyyyMMdd
        ("Nov 01, 2013", date(2013, 11, 1)),  # MMM dd, yyyy
        ("01 Nov 2013", date(2013, 11, 1)),  # dd MMM yyyy
        ("November 01, 2013", date(2013, 11, 1)),  # MMMM dd, yyyy
        ("01 November 2013", date(2013, 11, 1)),  # dd MMMM yyyy
    ],
)
def test_parse_date_accepted_formats(value, expected):
    assert parse_date(value) == expected


def test_parse_date_first_matching_format_wins():
    # Both MM/dd and dd/MM fit; MM/dd comes first
    assert parse_date("01/11/2013") == date(2013, 1, 11)


def test_parse_date_generic_fallback():
    assert parse_date("2013-11-01T10:30:00") == date(2013, 11, 1)
    assert parse_date("Friday, November 1, 2013") == date(2013, 11, 1)


@pytest.mark.parametrize(
    "value", ["", "   ", "banana", "2013-02-30", "3", "2020", "Nov", "10:30", "Nov 2013"]
)
def test_parse_date_rejects_invalid(value):
    assert parse_date(value) is None


def test_split_csv_line_quotes():
    assert split_csv_line('1,"100","Nov 01, 2013",NULL') == ["1", "100", "Nov 01, 2013", "NULL"]
    assert split_csv_line('"say ""hi""",2') == ['say "hi"', "2"]


def test_is_header_row():
    assert is_header_row(["EmpID", "ProjectID", "DateFrom", "DateTo"])
    assert is_header_row(["1", "ProjectID", "DateFrom", "DateTo"])
    assert not is_header_row(["1", "100", "2020-01-01", "NULL"])
    assert not is_header_row(["EmpID"])


def test_parse_with_header(sample_csv):
    records = parse_assignments(sample_csv)
    assert records == [
        AssignmentInterval(1, 100, date(2020, 1, 1), date(2020, 1, 10)),
        AssignmentInterval(2, 100, date(2020, 1, 5), date(2020, 1, 20)),
    ]


def test_parse_without_header():
    records = parse_assignments("143,12,2013-11-01,2014-01-05\n218,10,2012-05-16,NULL\n")
    assert len(records) == 2
    assert records[0].employee_id == 143
    assert records[1].end_date is None


@pytest.mark.parametrize("token", ["NULL", "null", "Null", "", "  "])
def test_open_end_tokens(token):
    records = parse_assignments(f"1,100,2020-01-01,{token}")
    assert records[0].end_date is None


def test_fields_are_trimmed():
    records = parse_assignments(" 1 , 100 , 2020-01-01 , 2020-02-01 ")
    assert records == [AssignmentInterval(1, 100, date(2020, 1, 1), date(2020, 2, 1))]


def test_quoted_date_with_comma():
    records = parse_assignments('1,100,"Nov 01, 2013","Dec 31, 2013"')
    assert records[0].start_date == date(2013, 11, 1)
    assert records[0].end_date == date(2013, 12, 31)


def test_bom_is_stripped():
    records = parse_assignments("\ufeffEmpID,ProjectID,DateFrom,DateTo\n1,100,2020-01-01,NULL")
    assert len(records) == 1


def test_bom_is_stripped_from_bytes():
    data = "1,100,2020-01-01,NULL\n".encode("utf-8-sig")
    records = parse_assignments_bytes(data)
    assert records[0].employee_id == 1


def test_blank_lines_skipped_but_counted():
    text = "EmpID,ProjectID,DateFrom,DateTo\n\n   \n1,100,banana,NULL\n"
    with pytest.raises(ParseError) as exc_info:
        parse_assignments(text)
    assert exc_info.value.line_number == 4
    assert "Invalid DateFrom format" in exc_info.value.reason


def test_empty_input():
    assert parse_assignments("") == []
    assert parse_assignments("\n\n") == []


def test_header_only_checked_on_first_line():
    text = "1,100,2020-01-01,NULL\nEmpID,ProjectID,DateFrom,DateTo\n"
    with pytest.raises(ParseError) as exc_info:
        parse_assignments(text)
    assert exc_info.value.line_number == 2
    assert "Invalid Employee ID" in str(exc_info.value)


def test_single_field_first_line_is_not_header():
    with pytest.raises(ParseError) as exc_info:
        parse_assignments("garbage\n1,100,2020-01-01,NULL")
    assert exc_info.value.line_number == 1
    assert exc_info.value.reason == "Expected 4 fields but found 1"


def test_wrong_field_count():
    with pytest.raises(ParseError) as exc_info:
        parse_assignments("1,100,2020-01-01,NULL\n2,100,2020-01-01\n")
    assert str(exc_info.value) == "Error parsing line 2: Expected 4 fields but found 3"


def test_invalid_project_id():
    with pytest.raises(ParseError, match="Invalid Project ID"):
        parse_assignments("1,100,2020-01-01,NULL\n2,abc,2020-01-01,NULL\n")


def test_invalid_date_to():
    with pytest.raises(ParseError, match="Invalid DateTo format"):
        parse_assignments('1,100,2020-01-01,""""')


def test_date_to_before_date_from():
    with pytest.raises(ParseError, match="DateTo cannot be earlier than DateFrom"):
        parse_assignments("1,100,2020-01-10,2020-01-09")


def test_same_day_assignment_is_valid():
    records = parse_assignments("1,100,2020-01-10,2020-01-10")
    assert records[0].start_date == records[0].end_date


def test_fails_on_first_bad_line():
    text = "1,100,2020-01-01,NULL\nx,100,bad,bad\n2,100,2020-01-01,NULL\n"
    with pytest.raises(ParseError) as exc_info:
        parse_assignments(text)
    assert exc_info.value.line_number == 2


def test_invalid_utf8_bytes():
    with pytest.raises(ParseError) as exc_info:
        parse_assignments_bytes(b"1,100,2020-01-01,NULL\n2,100,\xff\xfe,NULL\n")
    assert exc_info.value.line_number == 2
    assert "not valid UTF-8" in exc_info.value.reason


def test_partial_date_is_a_parse_error():
    with pytest.raises(ParseError) as exc_info:
        parse_assignments("1,100,3,4\n2,100,2,5\n")
    assert exc_info.value.line_number == 1
    assert exc_info.value.reason == "Invalid DateFrom format: '3'"


@pytest.mark.parametrize("newline", ["\n", "\r\n", "\r"])
def test_line_endings(newline):
    text = newline.join(["EmpID,ProjectID,DateFrom,DateTo", "", "1,100,banana,NULL"])
    with pytest.raises(ParseError) as exc_info:
        parse_assignments(text)
    assert exc_info.value.line_number == 3


def test_other_separators_do_not_end_a_line():
    # A form feed inside a row is part of the field, not a line break
    with pytest.raises(ParseError) as exc_info:
        parse_assignments("1,100,2020-01-01,NULL\n2,100,2020-01-01\x0c,NULL\n3,100,x,NULL\n")
    assert exc_info.value.line_number == 3


def test_invalid_utf8_line_number_with_cr_endings():
    with pytest.raises(ParseError) as exc_info:
        parse_assignments_bytes(b"1,100,2020-01-01,NULL\r2,100,2020-01-01,NULL\r3,\xff,x,NULL")
    assert exc_info.value.line_number == 3


@pytest.mark.parametrize("value", ["\u0661\u0662", "2147483648", "-2147483649"])
def test_employee_id_must_be_ascii_int32(value):
    with pytest.raises(ParseError, match="Invalid Employee ID"):
        parse_assignments(f"1,100,2020-01-01,NULL\n{value},100,2020-01-01,NULL\n")


def test_int32_bounds_accepted():
    records = parse_assignments("2147483647,-2147483648,2020-01-01,NULL")
    assert records[0].employee_id == 2147483647
    assert records[0].project_id == -2147483648
