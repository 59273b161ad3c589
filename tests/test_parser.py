"""Tests for upload parsing."""

import io
import json
from datetime import datetime

import pandas as pd
import pytest

from guestpulse.core.errors import InvalidFileError
from guestpulse.utils.parser import (
    month_from_timestamp,
    parse_spreadsheet,
    parse_survey,
    parse_upload,
    text_allowed,
)


def _csv(text):
    return io.BytesIO(text.encode("utf-8"))


class TestSpreadsheet:
    """Two-column (text, month) sheets."""

    def test_rows_with_empty_text_or_month_are_excluded(self):
        df = pd.DataFrame([
            ["Review", "Month"],
            ["Great stay!", "Jan"],
            ["   ", "Feb"],
            ["No month here", None],
            ["Lovely pool", "  "],
            ["Terrible service", "Mar"],
        ])
        records = parse_spreadsheet(df)

        assert [r.text for r in records] == ["Great stay!", "Terrible service"]
        assert [r.month for r in records] == ["Jan", "Mar"]
        assert [r.id for r in records] == [0, 1]

    def test_text_and_month_are_trimmed(self):
        df = pd.DataFrame([["Review", "Month"], ["  Nice room  ", " Apr "]])
        record = parse_spreadsheet(df)[0]
        assert record.text == "Nice room"
        assert record.month == "Apr"
        assert record.rating is None

    def test_non_ascii_text_is_dropped(self):
        df = pd.DataFrame([
            ["Review", "Month"],
            ["Très bien", "Jan"],
            ["It’s great… really", "Jan"],
        ])
        records = parse_spreadsheet(df)
        assert [r.text for r in records] == ["It’s great… really"]

    def test_datetime_month_becomes_abbreviation(self):
        df = pd.DataFrame([["Review", "Month"], ["Fine", datetime(2024, 5, 3)]])
        assert parse_spreadsheet(df)[0].month == "May"

    def test_parse_csv_upload(self):
        source = _csv("Review,Month\nGreat stay!,Jan\nTerrible service,Feb\n")
        records = parse_upload(source, "reviews.csv")
        assert [(r.id, r.text, r.month) for r in records] == [
            (0, "Great stay!", "Jan"),
            (1, "Terrible service", "Feb"),
        ]

    def test_rows_with_extra_fields_are_kept(self):
        source = _csv("Review,Month\nGreat stay!,Jan\nGreat stay, loved it,Feb\nTerrible service,Mar\n")
        records = parse_upload(source, "reviews.csv")

        assert len(records) == 3
        assert records[0].text == "Great stay!"
        assert records[1].text == "Great stay"
        assert (records[2].text, records[2].month) == ("Terrible service", "Mar")

    def test_header_only_file_is_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_upload(_csv("Review,Month\n"), "reviews.csv")

    def test_empty_file_is_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_upload(_csv(""), "reviews.csv")

    def test_fully_invalid_rows_are_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_upload(_csv("Review,Month\n,Jan\nNo month,\n"), "reviews.csv")

    def test_unsupported_extension(self):
        with pytest.raises(InvalidFileError):
            parse_upload(_csv("hello"), "reviews.txt")


def test_text_allowed():
    assert text_allowed("Plain ASCII, with punctuation!")
    assert text_allowed("“Quoted” – fine")
    assert not text_allowed("Emoji 😀")
    assert not text_allowed("Café")


class TestSurvey:
    """Survey export arrays."""

    def test_rating_and_text_join(self):
        data = [{
            "id": "abc",
            "createTime": "2024-03-10T12:00:00Z",
            "surveyResponses": {
                "rateStay": 4,
                "liked": "The breakfast",
                "disliked": "  Slow wifi ",
                "empty": "",
            },
        }]
        record = parse_survey(data)[0]
        assert record.text == "The breakfast. Slow wifi"
        assert record.month == "Mar"
        assert record.rating == 4.0

    def test_rating_is_clamped(self):
        data = [{"createTime": "2024-01-01", "surveyResponses": {"overallRate": 9, "q": "ok"}}]
        assert parse_survey(data)[0].rating == 5.0

    def test_entries_without_text_or_date_are_skipped(self):
        data = [
            {"createTime": "2024-01-01", "surveyResponses": {"rate": 3}},
            {"surveyResponses": {"q": "no date"}},
            {"createTime": "2024-02-01", "surveyResponses": {"q": "kept"}},
            "not an entry",
        ]
        records = parse_survey(data)
        assert [r.text for r in records] == ["kept"]
        assert records[0].id == 0

    def test_non_array_is_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_survey({"surveyResponses": {}})

    def test_parse_json_upload(self):
        payload = [{"createTime": {"_seconds": 1717200000}, "surveyResponses": {"q": "Good"}}]
        source = io.BytesIO(json.dumps(payload).encode("utf-8"))
        records = parse_upload(source, "survey.json")
        assert records[0].month == "Jun"

    def test_malformed_json_is_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_upload(io.BytesIO(b"[{not json"), "survey.json")


def test_month_from_timestamp():
    assert month_from_timestamp("2024-12-25T08:00:00Z") == "Dec"
    assert month_from_timestamp(1704067200) == "Jan"
    assert month_from_timestamp(1704067200000) == "Jan"
    assert month_from_timestamp("not a date") == ""
    assert month_from_timestamp(None) == ""
