"""Data preparation for export and re-import of a dashboard."""

import datetime
import json
import logging
from typing import Any, Dict, List

from ..core.constants import ErrorConstants, FileConstants
from ..core.errors import InvalidFileError
from ..core.models import (
    DashboardState,
    Review,
    Sentiment,
    Topic,
    TopicAnalysis,
    TopicInsight,
    TopicSuggestionGroup,
    TrendPoint,
)
from .parser import load_json

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("reviews", "consolidatedData", "sentimentTrend", "detailedAnalysis")


def _analysis_to_dict(analysis: TopicAnalysis) -> Dict[str, Any]:
    return {
        "topic": analysis.topic.value,
        "positiveSummary": analysis.positive_summary,
        "negativeSummary": analysis.negative_summary,
        "suggestions": list(analysis.suggestions),
    }


def prepare_export(state: DashboardState) -> Dict[str, Any]:
    """Prepare a dashboard for JSON export."""
    return {
        "reviews": [
            {
                "id": r.id,
                "text": r.text,
                "month": r.month,
                "rating": r.rating,
                "sentiment": r.sentiment.value,
                "topic": r.topic.value,
            }
            for r in state.reviews
        ],
        "consolidatedData": {
            "consolidatedReview": state.consolidated_review,
            "keyPositives": state.key_positives,
            "suggestions": [
                {"topic": g.topic.value, "suggestions": list(g.suggestions)}
                for g in state.suggestions
            ],
            "overallRating": state.overall_rating,
        },
        "sentimentTrend": [
            {"month": p.month, "avgRating": p.avg_rating} for p in state.sentiment_trend
        ],
        "detailedAnalysis": [
            {
                "topic": item.topic.value,
                "total": item.total,
                "positive": item.positive,
                "negative": item.negative,
                "analysis": _analysis_to_dict(item.analysis),
            }
            for item in state.detailed_analysis
        ],
        "metadata": {
            "exportTimestamp": None,  # Will be set by caller
            "version": FileConstants.EXPORT_VERSION,
        },
    }


def dumps_export(state: DashboardState) -> str:
    """Serialize a dashboard to a JSON string with an export timestamp."""
    data = prepare_export(state)
    data["metadata"]["exportTimestamp"] = datetime.datetime.now().isoformat()
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_to_json(state: DashboardState, filename: str) -> None:
    """Export a dashboard to a JSON file."""
    with open(filename, "w", encoding="utf-8") as f:
        f.write(dumps_export(state))
    logger.info(f"Exported {len(state.reviews)} reviews to {filename}")


def _analysis_from_dict(data: Dict[str, Any]) -> TopicAnalysis:
    return TopicAnalysis(
        topic=Topic(data["topic"]),
        positive_summary=str(data["positiveSummary"]),
        negative_summary=str(data["negativeSummary"]),
        suggestions=[str(s) for s in data.get("suggestions", [])],
    )


def _reviews_from_list(items: List[Dict[str, Any]]) -> List[Review]:
    return [
        Review(
            id=int(item["id"]),
            text=str(item["text"]),
            month=str(item.get("month", "")),
            rating=float(item["rating"]),
            sentiment=Sentiment(item["sentiment"]),
            topic=Topic(item.get("topic", Topic.OTHER.value)),
        )
        for item in items
    ]


def state_from_export(data: Any) -> DashboardState:
    """Rebuild a dashboard from an exported document, without re-analysis.

    Raises:
        InvalidFileError: a required field is missing or malformed, or there are no reviews
    """
    if not isinstance(data, dict) or any(key not in data for key in REQUIRED_FIELDS):
        raise InvalidFileError(ErrorConstants.INVALID_EXPORT)
    if not data["reviews"]:
        raise InvalidFileError(ErrorConstants.INVALID_EXPORT)

    try:
        consolidated = data["consolidatedData"]
        return DashboardState(
            reviews=_reviews_from_list(data["reviews"]),
            consolidated_review=str(consolidated["consolidatedReview"]),
            key_positives=str(consolidated.get("keyPositives", "")),
            suggestions=[
                TopicSuggestionGroup(topic=Topic(g["topic"]),
                                     suggestions=[str(s) for s in g.get("suggestions", [])])
                for g in consolidated.get("suggestions", [])
            ],
            overall_rating=float(consolidated["overallRating"]),
            sentiment_trend=[
                TrendPoint(month=str(p["month"]), avg_rating=float(p["avgRating"]))
                for p in data["sentimentTrend"]
            ],
            detailed_analysis=[
                TopicInsight(
                    topic=Topic(item["topic"]),
                    total=int(item["total"]),
                    positive=int(item["positive"]),
                    negative=int(item["negative"]),
                    analysis=_analysis_from_dict(item["analysis"]),
                )
                for item in data["detailedAnalysis"]
            ],
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.error(f"Rejected analysis file: {e!r}")
        raise InvalidFileError(ErrorConstants.INVALID_EXPORT) from e


def load_export(source: Any) -> DashboardState:
    """Load a previously exported dashboard from a path or file-like object."""
    state = state_from_export(load_json(source))
    logger.info(f"Loaded saved analysis with {len(state.reviews)} reviews")
    return state
