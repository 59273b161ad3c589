"""Dashboard state container and review-table view logic.

``DashboardSession`` wraps a mutable mapping (``st.session_state`` in the
app, a plain dict in tests) so the rest of the UI reads and writes state
through one object instead of loose session keys.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, MutableMapping, Optional, Sequence, Union

from ..core.errors import GuestPulseError
from ..core.models import ALL_SENTIMENTS, DashboardState, Review, Sentiment, Topic

logger = logging.getLogger(__name__)

ALL = "all"
SORT_KEYS = ("rating", "topic")
ASCENDING = "ascending"
DESCENDING = "descending"


@dataclass
class ReviewTableView:
    """Filters, search, sort and page for the reviews table."""
    sentiment: Union[Sentiment, str] = ALL
    topic: Union[Topic, str] = ALL
    search: str = ""
    sort_key: Optional[str] = None
    sort_direction: str = ASCENDING
    page: int = 1


def filter_reviews(reviews: Sequence[Review], view: ReviewTableView) -> List[Review]:
    """Apply sort, sentiment/topic filters and case-insensitive text search."""
    items = list(reviews)
    if view.sort_key in SORT_KEYS:
        if view.sort_key == "rating":
            sort_value = lambda r: r.rating
        else:
            sort_value = lambda r: r.topic.value
        items.sort(key=sort_value, reverse=view.sort_direction == DESCENDING)

    needle = view.search.strip().lower()
    return [
        r for r in items
        if (view.sentiment == ALL or r.sentiment == view.sentiment)
        and (view.topic == ALL or r.topic == view.topic)
        and (not needle or needle in r.text.lower())
    ]


def total_pages(count: int, page_size: int) -> int:
    return max(1, math.ceil(count / page_size)) if page_size > 0 else 1


def paginate(items: Sequence[Review], page: int, page_size: int) -> List[Review]:
    """Rows of a 1-based page, clamped to the available pages."""
    page = min(max(1, page), total_pages(len(items), page_size))
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def sentiment_filter_counts(reviews: Sequence[Review]) -> Dict[str, int]:
    """Counts shown next to each entry of the sentiment filter menu."""
    counts = {ALL: len(reviews)}
    counts.update({s.value: 0 for s in ALL_SENTIMENTS})
    for review in reviews:
        counts[review.sentiment.value] += 1
    return counts


class DashboardSession:
    """Owns the loaded dashboard and the UI-only state around it."""

    DASHBOARD_KEY = "dashboard"
    TABLE_KEY = "review_table"
    ANSWERS_KEY = "qa_answers"
    ERROR_KEY = "last_error"

    def __init__(self, store: MutableMapping):
        self.store = store
        self.store.setdefault(self.DASHBOARD_KEY, None)
        self.store.setdefault(self.TABLE_KEY, ReviewTableView())
        self.store.setdefault(self.ANSWERS_KEY, {})
        self.store.setdefault(self.ERROR_KEY, None)

    @property
    def dashboard(self) -> Optional[DashboardState]:
        return self.store[self.DASHBOARD_KEY]

    @property
    def has_dashboard(self) -> bool:
        return self.dashboard is not None and bool(self.dashboard.reviews)

    @property
    def table(self) -> ReviewTableView:
        return self.store[self.TABLE_KEY]

    @property
    def answers(self) -> Dict[str, str]:
        return self.store[self.ANSWERS_KEY]

    @property
    def last_error(self) -> Optional[GuestPulseError]:
        return self.store[self.ERROR_KEY]

    def load(self, state: DashboardState) -> None:
        """Replace the whole dashboard; view state and answers start fresh."""
        self.store[self.DASHBOARD_KEY] = state
        self.store[self.TABLE_KEY] = ReviewTableView()
        self.store[self.ANSWERS_KEY] = {}
        self.store[self.ERROR_KEY] = None

    def reset(self) -> None:
        self.store[self.DASHBOARD_KEY] = None
        self.store[self.TABLE_KEY] = ReviewTableView()
        self.store[self.ANSWERS_KEY] = {}

    def run(self, build) -> bool:
        """Load the dashboard returned by ``build()``; on failure reset and keep the error."""
        try:
            state = build()
        except GuestPulseError as e:
            logger.error(f"Analysis failed: {e.message}")
            self.reset()
            self.store[self.ERROR_KEY] = e
            return False
        self.load(state)
        return True

    def update_table(self, **changes) -> None:
        """Change table view fields; any filter, search or sort change returns to page 1."""
        view = self.table
        reset_page = False
        for name, value in changes.items():
            if name != "page" and getattr(view, name) != value:
                reset_page = True
            setattr(view, name, value)
        if reset_page:
            view.page = 1

    def visible_reviews(self, page_size: int) -> List[Review]:
        if not self.has_dashboard:
            return []
        filtered = filter_reviews(self.dashboard.reviews, self.table)
        return paginate(filtered, self.table.page, page_size)

    def pop_error(self) -> Optional[GuestPulseError]:
        """Return the last failure once, clearing it."""
        error = self.store[self.ERROR_KEY]
        self.store[self.ERROR_KEY] = None
        return error
