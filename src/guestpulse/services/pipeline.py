"""End-to-end analysis: parse, classify, aggregate, summarize."""

import asyncio
import logging
import time
from typing import Any, Awaitable, Optional, Sequence, TypeVar

from ..core.aggregation import build_detailed_analysis, overall_rating, sentiment_trend
from ..core.constants import ErrorConstants, PlaceholderConstants
from ..core.errors import GuestPulseError, UnknownError
from ..core.models import DashboardState, ParsedRecord, Review
from ..utils.parser import parse_upload
from .classifier import BatchClassifier
from .llm import LLMServiceFactory
from .summarizer import Summarizer, SummaryBundle

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_dashboard(reviews: Sequence[Review], bundle: SummaryBundle) -> DashboardState:
    """Assemble the dashboard from classified reviews and the summarizer's output."""
    reviews = list(reviews)
    return DashboardState(
        reviews=reviews,
        consolidated_review=bundle.summary.consolidated_review or PlaceholderConstants.NO_SUMMARY,
        key_positives=bundle.summary.key_positives or PlaceholderConstants.NO_POSITIVES,
        suggestions=bundle.suggestions,
        overall_rating=overall_rating(reviews),
        sentiment_trend=sentiment_trend(reviews),
        detailed_analysis=build_detailed_analysis(reviews, bundle.topic_analyses),
    )


def _run(coro: Awaitable[T]) -> T:
    """Run a coroutine to completion, normalizing unexpected failures to UnknownError."""
    try:
        return asyncio.run(coro)
    except GuestPulseError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure")
        raise UnknownError(str(e) or ErrorConstants.UNKNOWN_FAILURE) from e


class ReviewAnalysisPipeline:
    """Orchestrates one analysis run against an LLM service."""

    def __init__(self, llm_service=None, batch_size: Optional[int] = None):
        self.llm_service = llm_service or LLMServiceFactory.create()
        self.classifier = BatchClassifier(self.llm_service, batch_size)
        self.summarizer = Summarizer(self.llm_service)

    async def analyze(self, records: Sequence[ParsedRecord]) -> DashboardState:
        """Classify then summarize; any failure propagates and nothing is kept."""
        start_time = time.time()
        reviews = await self.classifier.classify(records)
        bundle = await self.summarizer.summarize(reviews)
        state = build_dashboard(reviews, bundle)
        logger.info(f"Analysis of {len(reviews)} reviews completed in {time.time() - start_time:.1f}s")
        return state

    def analyze_records(self, records: Sequence[ParsedRecord]) -> DashboardState:
        return _run(self.analyze(records))

    def analyze_upload(self, source: Any, filename: Optional[str] = None) -> DashboardState:
        """Parse an uploaded file and analyze it.

        Raises:
            InvalidFileError: the file holds no usable reviews
            ClassificationError: a classification batch came back malformed
            AnalysisError: a summary/suggestion/topic response came back malformed
            UnknownError: anything else
        """
        try:
            records = parse_upload(source, filename)
        except GuestPulseError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure while parsing upload")
            raise UnknownError(str(e) or ErrorConstants.UNREADABLE_FILE) from e
        return self.analyze_records(records)

    def ask(self, reviews: Sequence[Review], question: str) -> str:
        """Answer a free-form question against the full review corpus."""
        texts = [r.text for r in reviews]
        return _run(self.llm_service.answer_question(texts, question))

    def draft_reply(self, review: Review) -> str:
        return _run(self.llm_service.draft_reply(review))
