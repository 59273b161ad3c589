"""Tests for the dashboard session and review-table view."""

import pytest

from guestpulse.core.errors import InvalidFileError
from guestpulse.core.models import Sentiment, Topic
from guestpulse.ui.state import (
    ALL,
    DESCENDING,
    DashboardSession,
    ReviewTableView,
    filter_reviews,
    paginate,
    sentiment_filter_counts,
    total_pages,
)
from guestpulse.utils.mock_data import mock_dashboard, mock_reviews


class TestReviewTable:
    """Filtering, sorting and pagination."""

    def setup_method(self):
        self.reviews = mock_reviews()

    def test_sentiment_and_topic_filters(self):
        view = ReviewTableView(sentiment=Sentiment.BAD, topic=Topic.PAYMENT)
        rows = filter_reviews(self.reviews, view)
        assert [r.id for r in rows] == [5, 14]

    def test_filters_accept_plain_values(self):
        rows = filter_reviews(self.reviews, ReviewTableView(sentiment="BEST"))
        assert all(r.sentiment == Sentiment.BEST for r in rows)
        assert len(rows) == 5

    def test_search_is_case_insensitive(self):
        rows = filter_reviews(self.reviews, ReviewTableView(search="  WI-FI "))
        assert [r.id for r in rows] == [4]

    def test_sort_by_rating(self):
        rows = filter_reviews(self.reviews, ReviewTableView(sort_key="rating", sort_direction=DESCENDING))
        ratings = [r.rating for r in rows]
        assert ratings == sorted(ratings, reverse=True)

    def test_sort_by_topic(self):
        rows = filter_reviews(self.reviews, ReviewTableView(sort_key="topic"))
        topics = [r.topic.value for r in rows]
        assert topics == sorted(topics)

    def test_pagination(self):
        assert total_pages(15, 5) == 3
        assert total_pages(0, 5) == 1
        assert [r.id for r in paginate(self.reviews, 2, 5)] == [5, 6, 7, 8, 9]
        # out-of-range pages clamp to the last page
        assert [r.id for r in paginate(self.reviews, 9, 5)] == [10, 11, 12, 13, 14]

    def test_sentiment_filter_counts(self):
        counts = sentiment_filter_counts(self.reviews)
        assert counts[ALL] == 15
        assert counts["BAD"] == 7
        assert counts["FARE"] == 1
        assert counts["Other"] == 0


class TestDashboardSession:
    """State container over a plain dict."""

    def setup_method(self):
        self.store = {}
        self.session = DashboardSession(self.store)

    def test_starts_empty(self):
        assert not self.session.has_dashboard
        assert self.session.visible_reviews(5) == []

    def test_run_loads_dashboard(self):
        assert self.session.run(mock_dashboard)
        assert self.session.has_dashboard
        assert len(self.session.visible_reviews(5)) == 5

    def test_failed_run_leaves_session_empty(self):
        def failing():
            raise InvalidFileError()

        assert not self.session.run(failing)
        assert not self.session.has_dashboard
        assert isinstance(self.session.last_error, InvalidFileError)

    def test_failed_run_resets_previous_dashboard(self):
        self.session.run(mock_dashboard)
        self.session.answers["q"] = "a"

        def failing():
            raise InvalidFileError()

        self.session.run(failing)
        assert self.session.dashboard is None
        assert self.session.answers == {}
        assert isinstance(self.session.pop_error(), InvalidFileError)
        assert self.session.last_error is None

    def test_non_taxonomy_errors_propagate(self):
        def broken():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            self.session.run(broken)

    def test_filter_change_resets_page(self):
        self.session.run(mock_dashboard)
        self.session.update_table(page=3)
        assert self.session.table.page == 3

        self.session.update_table(search="room")
        assert self.session.table.page == 1

    def test_unchanged_filter_keeps_page(self):
        self.session.run(mock_dashboard)
        self.session.update_table(page=2)
        self.session.update_table(sentiment=ALL, page=2)
        assert self.session.table.page == 2

    def test_load_resets_view_and_answers(self):
        self.session.run(mock_dashboard)
        self.session.update_table(search="food")
        self.session.answers["q"] = "a"
        self.session.load(mock_dashboard())
        assert self.session.table == ReviewTableView()
        assert self.session.answers == {}
