"""Tests for export and re-import of a dashboard."""

import io
import json

import pytest

from guestpulse.core.errors import InvalidFileError
from guestpulse.utils.data_prep import (
    REQUIRED_FIELDS,
    dumps_export,
    export_to_json,
    load_export,
    prepare_export,
    state_from_export,
)
from guestpulse.utils.mock_data import mock_dashboard


def test_export_then_import_reproduces_state():
    state = mock_dashboard()
    restored = load_export(io.StringIO(dumps_export(state)))
    assert restored == state


def test_export_to_file_roundtrip(tmp_path):
    state = mock_dashboard()
    path = tmp_path / "analysis.json"
    export_to_json(state, str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["metadata"]["version"] == "1.0.0"
    assert data["metadata"]["exportTimestamp"]
    assert load_export(str(path)) == state


def test_export_layout():
    data = prepare_export(mock_dashboard())
    assert set(REQUIRED_FIELDS) <= set(data)
    assert set(data["consolidatedData"]) == {"consolidatedReview", "keyPositives", "suggestions", "overallRating"}
    assert set(data["sentimentTrend"][0]) == {"month", "avgRating"}
    assert set(data["detailedAnalysis"][0]["analysis"]) == {"topic", "positiveSummary", "negativeSummary",
                                                            "suggestions"}
    assert data["reviews"][0]["sentiment"] == "BEST"


def test_metadata_is_optional():
    data = prepare_export(mock_dashboard())
    del data["metadata"]
    assert state_from_export(data) == mock_dashboard()


@pytest.mark.parametrize("missing", REQUIRED_FIELDS)
def test_missing_required_field_is_rejected(missing):
    data = prepare_export(mock_dashboard())
    del data[missing]
    with pytest.raises(InvalidFileError):
        state_from_export(data)


def test_malformed_values_are_rejected():
    data = prepare_export(mock_dashboard())
    data["reviews"][0]["sentiment"] = "EXCELLENT"
    with pytest.raises(InvalidFileError):
        state_from_export(data)


def test_non_object_document_is_rejected():
    with pytest.raises(InvalidFileError):
        state_from_export([1, 2, 3])
    with pytest.raises(InvalidFileError):
        load_export(io.StringIO("not json"))


def test_export_without_reviews_is_rejected():
    data = prepare_export(mock_dashboard())
    data["reviews"] = []
    with pytest.raises(InvalidFileError):
        state_from_export(data)
