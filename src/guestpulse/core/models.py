"""Data models for GuestPulse."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List


class Sentiment(str, Enum):
    """Coarse feedback polarity bucket assigned to a review."""
    BEST = "BEST"
    GOOD = "GOOD"
    FARE = "FARE"
    BAD = "BAD"
    OTHER = "Other"


class Topic(str, Enum):
    """Fixed category a review is assigned to."""
    RESERVATION = "Reservation"
    MANAGEMENT_SERVICE = "Management Service"
    FOOD = "Food"
    PAYMENT = "Payment"
    OTHER = "Other"


ALL_TOPICS: List[Topic] = list(Topic)
ALL_SENTIMENTS: List[Sentiment] = list(Sentiment)

POSITIVE_SENTIMENTS = (Sentiment.BEST, Sentiment.GOOD)
NEGATIVE_SENTIMENTS = (Sentiment.FARE, Sentiment.BAD)

# rating used when the input carries no explicit rating
RATING_MAP = {
    Sentiment.BEST: 5.0,
    Sentiment.GOOD: 4.0,
    Sentiment.FARE: 2.5,
    Sentiment.BAD: 1.0,
    Sentiment.OTHER: 3.0,
}


@dataclass
class ParsedRecord:
    """A normalized input row, before classification."""
    id: int
    text: str
    month: str
    rating: Optional[float] = None


@dataclass(frozen=True)
class Review:
    """A classified review, merged with its parsed record."""
    id: int
    text: str
    month: str
    rating: float
    sentiment: Sentiment
    topic: Topic = Topic.OTHER

    @property
    def is_positive(self) -> bool:
        return self.sentiment in POSITIVE_SENTIMENTS

    @property
    def is_negative(self) -> bool:
        return self.sentiment in NEGATIVE_SENTIMENTS


@dataclass
class TopicSuggestionGroup:
    """Actionable suggestions for one topic."""
    topic: Topic
    suggestions: List[str] = field(default_factory=list)


@dataclass
class TopicAnalysis:
    """Narrative analysis of one topic."""
    topic: Topic
    positive_summary: str
    negative_summary: str
    suggestions: List[str] = field(default_factory=list)


@dataclass
class TopicInsight:
    """Per-topic counts merged with the topic's analysis."""
    topic: Topic
    total: int
    positive: int
    negative: int
    analysis: TopicAnalysis


@dataclass
class TrendPoint:
    """Average rating for one month."""
    month: str
    avg_rating: float


@dataclass
class SummaryResult:
    """Corpus-wide summary returned by the summary call."""
    consolidated_review: str
    key_positives: str


@dataclass
class DashboardState:
    """Everything the dashboard renders, built once per upload."""
    reviews: List[Review]
    consolidated_review: str
    key_positives: str
    suggestions: List[TopicSuggestionGroup]
    overall_rating: float
    sentiment_trend: List[TrendPoint]
    detailed_analysis: List[TopicInsight]
