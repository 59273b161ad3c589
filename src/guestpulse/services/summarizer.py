"""Corpus summary, improvement suggestions and per-topic analysis."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from ..core.aggregation import placeholder_analysis
from ..core.models import (
    ALL_TOPICS,
    Review,
    SummaryResult,
    Topic,
    TopicAnalysis,
    TopicSuggestionGroup,
)

logger = logging.getLogger(__name__)


def merge_suggestion_groups(groups: Sequence[TopicSuggestionGroup]) -> List[TopicSuggestionGroup]:
    """Fold repeated topics into one group each, keeping first-seen order."""
    merged: Dict[Topic, TopicSuggestionGroup] = {}
    for group in groups:
        if group.topic in merged:
            merged[group.topic].suggestions.extend(group.suggestions)
        else:
            merged[group.topic] = TopicSuggestionGroup(topic=group.topic,
                                                       suggestions=list(group.suggestions))
    return list(merged.values())


def group_texts_by_topic(reviews: Sequence[Review]) -> Dict[Topic, List[str]]:
    """Review texts for every fixed topic (empty lists included)."""
    grouped = {topic: [] for topic in ALL_TOPICS}
    for review in reviews:
        if review.text:
            grouped[review.topic].append(review.text)
    return grouped


@dataclass
class SummaryBundle:
    """Everything the summarizer produces for one run."""
    summary: SummaryResult
    suggestions: List[TopicSuggestionGroup]
    topic_analyses: Dict[Topic, TopicAnalysis]


class Summarizer:
    """Runs the summary, suggestion and per-topic analysis calls concurrently."""

    def __init__(self, llm_service):
        self.llm_service = llm_service

    async def _topic_analysis(self, topic: Topic, texts: List[str]) -> TopicAnalysis:
        if not texts:
            return placeholder_analysis(topic)
        return await self.llm_service.generate_topic_analysis(texts, topic)

    async def summarize(self, reviews: Sequence[Review]) -> SummaryBundle:
        """Summarize the classified reviews; raises AnalysisError on a malformed response."""
        texts = [r.text for r in reviews]
        by_topic = group_texts_by_topic(reviews)
        scheduled = [t for t in ALL_TOPICS if by_topic[t]]
        logger.info(f"Summarizing {len(texts)} reviews; analyzing {len(scheduled)} topics")

        summary, raw_suggestions, *analyses = await asyncio.gather(
            self.llm_service.generate_summary(texts),
            self.llm_service.generate_suggestions(texts),
            *(self._topic_analysis(topic, by_topic[topic]) for topic in ALL_TOPICS),
        )

        return SummaryBundle(
            summary=summary,
            suggestions=merge_suggestion_groups(raw_suggestions),
            topic_analyses=dict(zip(ALL_TOPICS, analyses)),
        )
