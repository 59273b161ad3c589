"""Aggregation of classified reviews into chart-ready figures.

Everything here is a pure function of the classified review set.
"""

from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .constants import PlaceholderConstants, UIConstants
from .models import (
    ALL_SENTIMENTS,
    ALL_TOPICS,
    NEGATIVE_SENTIMENTS,
    Review,
    Sentiment,
    Topic,
    TopicAnalysis,
    TopicInsight,
    TrendPoint,
)


def overall_rating(reviews: Sequence[Review]) -> float:
    """Arithmetic mean of review ratings, 0 for an empty set."""
    if not reviews:
        return 0.0
    return sum(r.rating for r in reviews) / len(reviews)


def month_key(month: str) -> str:
    """Reduce a month label ("january", "Jan 2024") to its 3-letter key."""
    return (month or "").strip()[:3].title()


def _month_index(key: str) -> Optional[int]:
    try:
        return datetime.strptime(key, "%b").month
    except ValueError:
        return None


def _trend_sort_key(key: str) -> Tuple[int, int, str]:
    index = _month_index(key)
    if index is None:
        # unknown labels go after the calendar, alphabetically
        return (1, 0, key)
    return (0, index, "")


def sentiment_trend(reviews: Sequence[Review]) -> List[TrendPoint]:
    """Average rating per month, in calendar order."""
    monthly = defaultdict(list)
    for review in reviews:
        key = month_key(review.month)
        if key:
            monthly[key].append(review.rating)

    trend = [
        TrendPoint(month=key, avg_rating=round(sum(ratings) / len(ratings), 2))
        for key, ratings in monthly.items()
    ]
    trend.sort(key=lambda point: _trend_sort_key(point.month))
    return trend


def topic_distribution(reviews: Sequence[Review]) -> Dict[Topic, int]:
    """Number of reviews per topic, every topic present."""
    counts = {topic: 0 for topic in ALL_TOPICS}
    for review in reviews:
        counts[review.topic] += 1
    return counts


def negative_feedback_by_topic(reviews: Sequence[Review]) -> Dict[Topic, Dict[Sentiment, int]]:
    """FARE and BAD counts per topic."""
    counts = {topic: {s: 0 for s in NEGATIVE_SENTIMENTS} for topic in ALL_TOPICS}
    for review in reviews:
        if review.sentiment in NEGATIVE_SENTIMENTS:
            counts[review.topic][review.sentiment] += 1
    return counts


def has_negative_feedback(counts: Mapping[Topic, Mapping[Sentiment, int]]) -> bool:
    return any(v > 0 for per_topic in counts.values() for v in per_topic.values())


def sentiment_counts(reviews: Sequence[Review]) -> Dict[Sentiment, int]:
    """Number of reviews per sentiment bucket."""
    counts = {sentiment: 0 for sentiment in ALL_SENTIMENTS}
    for review in reviews:
        counts[review.sentiment] += 1
    return counts


def sentiment_split(reviews: Sequence[Review]) -> Dict[str, float]:
    """Positive (BEST/GOOD) against negative (FARE/BAD) counts and percentages."""
    total = len(reviews)
    positive = sum(1 for r in reviews if r.is_positive)
    negative = sum(1 for r in reviews if r.is_negative)
    return {
        "total": total,
        "positive": positive,
        "negative": negative,
        "positive_pct": (positive / total) * 100 if total else 0.0,
        "negative_pct": (negative / total) * 100 if total else 0.0,
    }


def top_topic(reviews: Sequence[Review], positive: bool = True) -> Optional[Topic]:
    """Best-rated topic among positive reviews, or worst-rated among negative ones."""
    ratings = defaultdict(list)
    for review in reviews:
        if (review.is_positive if positive else review.is_negative):
            ratings[review.topic].append(review.rating)
    if not ratings:
        return None

    averages = {topic: sum(v) / len(v) for topic, v in ratings.items()}
    # ties resolve to the first topic in fixed order
    ordered = [t for t in ALL_TOPICS if t in averages]
    if positive:
        return max(ordered, key=lambda t: averages[t])
    return min(ordered, key=lambda t: averages[t])


def placeholder_analysis(topic: Topic) -> TopicAnalysis:
    """Analysis used for a topic nobody wrote about."""
    return TopicAnalysis(
        topic=topic,
        positive_summary=PlaceholderConstants.NO_FEEDBACK,
        negative_summary=PlaceholderConstants.NO_FEEDBACK,
        suggestions=[],
    )


def build_detailed_analysis(
    reviews: Sequence[Review],
    analyses: Mapping[Topic, TopicAnalysis],
) -> List[TopicInsight]:
    """One insight per fixed topic: counts plus the summarizer's analysis."""
    insights = []
    for topic in ALL_TOPICS:
        topic_reviews = [r for r in reviews if r.topic == topic]
        total = len(topic_reviews)
        analysis = analyses.get(topic)
        if total == 0 or analysis is None:
            analysis = placeholder_analysis(topic)
        elif analysis.topic != topic:
            analysis = TopicAnalysis(
                topic=topic,
                positive_summary=analysis.positive_summary,
                negative_summary=analysis.negative_summary,
                suggestions=list(analysis.suggestions),
            )
        insights.append(TopicInsight(
            topic=topic,
            total=total,
            positive=sum(1 for r in topic_reviews if r.is_positive),
            negative=sum(1 for r in topic_reviews if r.is_negative),
            analysis=analysis,
        ))
    return insights


def rating_band(rating: float) -> Tuple[str, str]:
    """Headline and description for an overall rating."""
    for threshold, title, description in UIConstants.RATING_BANDS:
        if rating >= threshold:
            return title, description
    return UIConstants.LOWEST_BAND


def key_positive_points(text: str) -> List[str]:
    """Split a bulleted key-positives string into individual points."""
    points = []
    for line in (text or "").split("\n"):
        line = line.strip()
        if line.startswith(("-", "*", "•")):
            line = line[1:].strip()
        if line:
            points.append(line)
    return points
