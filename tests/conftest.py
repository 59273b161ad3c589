"""Shared fixtures: an in-memory LLM service that records its calls."""

import asyncio
from collections import Counter

import pytest

from guestpulse.core.models import (
    RATING_MAP,
    Sentiment,
    SummaryResult,
    Topic,
    TopicAnalysis,
    TopicSuggestionGroup,
)
from guestpulse.core.schemas import ClassifiedReview


class FakeLLMService:
    """Deterministic stand-in for OpenAIService.

    ``labels`` maps review text to (sentiment, topic); anything else is GOOD/Other.
    """

    def __init__(self, labels=None, suggestions=None):
        self.labels = labels or {}
        self.suggestions = suggestions or []
        self.calls = Counter()
        self.batches = []
        self.topic_calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _call(self, name):
        self.calls[name] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        # yield so calls scheduled together overlap
        await asyncio.sleep(0)
        self.in_flight -= 1

    async def classify_reviews(self, texts):
        await self._call("classify")
        self.batches.append(list(texts))
        results = []
        for i, text in enumerate(texts):
            sentiment, topic = self.labels.get(text, (Sentiment.GOOD, Topic.OTHER))
            results.append(ClassifiedReview(id=i, text=text, rating=RATING_MAP[sentiment],
                                            sentiment=sentiment, topic=topic))
        return results

    async def generate_summary(self, texts):
        await self._call("summary")
        return SummaryResult(consolidated_review=f"{len(texts)} reviews.",
                             key_positives="- Friendly staff")

    async def generate_suggestions(self, texts):
        await self._call("suggestions")
        return [TopicSuggestionGroup(g.topic, list(g.suggestions)) for g in self.suggestions]

    async def generate_topic_analysis(self, texts, topic):
        await self._call("topic")
        self.topic_calls.append(topic)
        return TopicAnalysis(topic=topic,
                             positive_summary=f"{topic.value} praised.",
                             negative_summary=f"{topic.value} criticised.",
                             suggestions=[f"Improve {topic.value}."])

    async def answer_question(self, texts, question):
        await self._call("answer")
        return f"Answer to: {question}"

    async def draft_reply(self, review):
        await self._call("reply")
        return f"Thanks for review {review.id}."


@pytest.fixture
def fake_llm():
    return FakeLLMService()
