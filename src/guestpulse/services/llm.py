"""LLM service for OpenAI integration."""

import json
import logging
import re
from textwrap import dedent
from typing import Any, Dict, List, Optional, Sequence, Type

import openai
from pydantic import BaseModel, ValidationError

from ..core.config import settings
from ..core.constants import ErrorConstants, PlaceholderConstants, PromptConstants
from ..core.errors import AnalysisError, ClassificationError, GuestPulseError
from ..core.models import (
    RATING_MAP,
    Review,
    Sentiment,
    SummaryResult,
    Topic,
    TopicAnalysis,
    TopicSuggestionGroup,
)
from ..core.schemas import (
    AnswerResponse,
    ClassificationResponse,
    ClassifiedReview,
    ReplyResponse,
    SuggestionsResponse,
    SummaryResponse,
    TopicAnalysisResponse,
)

logger = logging.getLogger(__name__)

_TOPIC_NAMES = ", ".join(f"'{t.value}'" for t in Topic)
_SENTIMENT_NAMES = ", ".join(f"'{s.value}'" for s in Sentiment)

CLASSIFY_PROMPT = dedent(f"""
You are an expert hospitality analyst classifying guest reviews.
Return ONLY JSON (no prose).

INPUT (via user message): reviews, one per line, each prefixed with its index in brackets, e.g. "[3] The pasta was divine."

For EVERY review produce one object:
- "id": the bracketed index, unchanged.
- "text": the review text.
- "sentiment": one of [{_SENTIMENT_NAMES}].
  BEST = delighted, GOOD = satisfied, FARE = mixed or mildly unhappy, BAD = clearly unhappy, Other = no opinion.
- "topic": one of [{_TOPIC_NAMES}]. Pick the single main topic.
- "rating": a number from 0.0 to 5.0 for this review.

Output format:
{{"analyzedReviews": [{{"id": 0, "text": "...", "sentiment": "GOOD", "topic": "Food", "rating": 4.0}}]}}
""").strip()

SUMMARY_PROMPT = dedent("""
You are an expert hospitality analyst. Based on the provided reviews, generate:
1. "consolidatedReview": a concise summary (2-3 sentences) of the overall sentiment.
2. "keyPositives": a bulleted list ("- " per line) of the main positive points.
   If there are no clear positive points, you MUST return an empty string.

Return ONLY JSON: {"consolidatedReview": str, "keyPositives": str}
""").strip()

SUGGESTIONS_PROMPT = dedent(f"""
Based on all reviews, provide a list of the most critical, actionable suggestions for improvement.

IMPORTANT: You MUST group all suggestions for the same topic into a single object with a 'suggestions' array.
Do not create duplicate entries for the same topic. Topics are one of [{_TOPIC_NAMES}].

If no suggestions can be derived from the reviews, you MUST return an empty array.

Return ONLY JSON: {{"suggestions": [{{"topic": str, "suggestions": [str]}}]}}
""").strip()

TOPIC_ANALYSIS_PROMPT = dedent(f"""
You are an expert hospitality analyst. The user provides the reviews for ONE topic.
Based *only* on those reviews:
1. "topic": the topic name, one of [{_TOPIC_NAMES}].
2. "positiveSummary": a SINGLE, BRIEF sentence (max 10 words) summarizing positive feedback.
3. "negativeSummary": a SINGLE, BRIEF sentence (max 10 words) summarizing negative feedback.
4. "suggestions": 1-2 SHORT, CONCRETE, PRACTICAL steps for improvement.

IMPORTANT RULES:
- If no reviews are provided, you MUST return "{PlaceholderConstants.NO_FEEDBACK}" for both summaries and an empty array for suggestions.
- If there is no positive feedback, positiveSummary MUST be "{PlaceholderConstants.NO_POSITIVE_FEEDBACK}".
- If there is no negative feedback, negativeSummary MUST be "{PlaceholderConstants.NO_NEGATIVE_FEEDBACK}".
- If no actionable suggestions can be made, the suggestions array MUST be empty.
- Do not invent feedback.

Return ONLY JSON: {{"detailedTopicAnalysis": [{{"topic": str, "positiveSummary": str, "negativeSummary": str, "suggestions": [str]}}]}}
""").strip()

ANSWER_PROMPT = dedent("""
You are an expert hospitality analyst answering a hotel manager's question about guest reviews.
Answer ONLY from the reviews provided. Be concise and specific; quote short phrases where useful.
If the reviews do not cover the question, say so.

Return ONLY JSON: {"answer": str}
""").strip()

REPLY_PROMPT = dedent("""
You are the guest relations manager of a hotel. Draft a short, polite public reply (3-5 sentences)
to the guest review below. Thank the guest, address the specific points they raise, apologise
for problems without making excuses, and never invent facts or offer compensation.

Return ONLY JSON: {"reply": str}
""").strip()


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    return re.sub(r"^```(?:json)?|```$", "", s, flags=re.IGNORECASE | re.MULTILINE).strip()


def _safe_json_loads(s: str) -> Any:
    """Parse JSON from an LLM response, tolerating code fences and surrounding prose."""
    try:
        return json.loads(_strip_code_fences(s))
    except json.JSONDecodeError:
        obj_match = re.search(r"\{.*\}", s, re.S)
        if obj_match:
            try:
                return json.loads(obj_match.group(0))
            except json.JSONDecodeError:
                pass
        raise ValueError(f"Could not parse JSON from: {s[:200]}...")


def _validate(schema: Type[BaseModel], data: Optional[Dict[str, Any]],
              error_cls: Type[GuestPulseError], message: str) -> BaseModel:
    """Validate a parsed response or raise the caller's error type."""
    if data is None:
        raise error_cls(message)
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        logger.error(f"{schema.__name__} rejected: {e.error_count()} validation errors")
        raise error_cls(message) from e


def _bullets(texts: Sequence[str]) -> str:
    return "\n".join(f"- {t}" for t in texts)


def _numbered(texts: Sequence[str]) -> str:
    return "\n".join(f"[{i}] {t}" for i, t in enumerate(texts))


class LLMServiceFactory:
    """Factory for creating LLM services."""

    @staticmethod
    def create():
        """Create appropriate LLM service."""
        if settings.openai_api_key:
            return OpenAIService()
        else:
            return FallbackLLMService()


class OpenAIService:
    """OpenAI-based LLM service.

    Every method is a single request; failures are never retried.
    Without an injected ``client`` each request opens and closes its own
    ``AsyncOpenAI`` client; pooled connections must not outlive the event
    loop of the ``asyncio.run`` that opened them.
    """

    def __init__(self, client: Optional[Any] = None):
        self.client = client
        self.model = settings.openai_model
        logger.info(f"OpenAI service initialized with model {self.model}")

    @staticmethod
    def _new_client() -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=settings.openai_api_key,
            max_retries=0,
            timeout=settings.request_timeout,
        )

    async def _complete(self, client: Any, system: str, user: str, temperature: float, max_tokens: int):
        return await client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user}
            ],
            max_tokens=max_tokens,
            temperature=temperature,
            response_format={"type": "json_object"},
        )

    async def chat_json(self, system: str, user: str, temperature: float = 0.3,
                        max_tokens: int = 800) -> Optional[Dict[str, Any]]:
        """Run one chat completion and parse its JSON body; None when there is none."""
        if self.client is not None:
            response = await self._complete(self.client, system, user, temperature, max_tokens)
        else:
            async with self._new_client() as client:
                response = await self._complete(client, system, user, temperature, max_tokens)

        if not response.choices:
            logger.warning("LLM returned no choices")
            return None

        content = response.choices[0].message.content
        if not content:
            logger.warning("LLM returned an empty message")
            return None

        try:
            data = _safe_json_loads(content)
        except ValueError as e:
            logger.warning(f"Unparseable LLM response: {e}")
            return None
        return data if isinstance(data, dict) else None

    async def classify_reviews(self, texts: Sequence[str]) -> List[ClassifiedReview]:
        """Label one batch of reviews with sentiment, topic and rating."""
        data = await self.chat_json(
            CLASSIFY_PROMPT,
            f"Reviews to analyze:\n{_numbered(texts)}",
            temperature=PromptConstants.CLASSIFY_TEMPERATURE,
            max_tokens=PromptConstants.CLASSIFY_MAX_TOKENS,
        )
        result = _validate(ClassificationResponse, data, ClassificationError,
                           ErrorConstants.CLASSIFICATION_FAILED)
        return result.analyzed_reviews

    async def generate_summary(self, texts: Sequence[str]) -> SummaryResult:
        """Consolidated narrative and key positives for the whole corpus."""
        data = await self.chat_json(
            SUMMARY_PROMPT,
            f"Reviews to analyze:\n{_bullets(texts)}",
            temperature=PromptConstants.SUMMARY_TEMPERATURE,
            max_tokens=PromptConstants.SUMMARY_MAX_TOKENS,
        )
        result = _validate(SummaryResponse, data, AnalysisError, ErrorConstants.SUMMARY_FAILED)
        return SummaryResult(
            consolidated_review=result.consolidated_review or PlaceholderConstants.NO_SUMMARY,
            key_positives=result.key_positives or "",
        )

    async def generate_suggestions(self, texts: Sequence[str]) -> List[TopicSuggestionGroup]:
        """Topic-grouped improvement suggestions, as returned (topics may repeat)."""
        data = await self.chat_json(
            SUGGESTIONS_PROMPT,
            f"Reviews to analyze:\n{_bullets(texts)}",
            temperature=PromptConstants.SUGGESTIONS_TEMPERATURE,
            max_tokens=PromptConstants.SUGGESTIONS_MAX_TOKENS,
        )
        result = _validate(SuggestionsResponse, data, AnalysisError, ErrorConstants.SUGGESTIONS_FAILED)
        return [TopicSuggestionGroup(topic=g.topic, suggestions=list(g.suggestions))
                for g in result.suggestions]

    async def generate_topic_analysis(self, texts: Sequence[str], topic: Topic) -> TopicAnalysis:
        """Positive/negative summaries and suggestions for one topic's reviews."""
        data = await self.chat_json(
            TOPIC_ANALYSIS_PROMPT,
            f"Topic: {topic.value}\nReviews to analyze:\n{_bullets(texts)}",
            temperature=PromptConstants.TOPIC_TEMPERATURE,
            max_tokens=PromptConstants.TOPIC_MAX_TOKENS,
        )
        result = _validate(TopicAnalysisResponse, data, AnalysisError,
                           ErrorConstants.TOPIC_ANALYSIS_FAILED)
        if not result.detailed_topic_analysis:
            raise AnalysisError(ErrorConstants.TOPIC_ANALYSIS_FAILED)

        entry = next((a for a in result.detailed_topic_analysis if a.topic == topic),
                     result.detailed_topic_analysis[0])
        return TopicAnalysis(
            topic=topic,
            positive_summary=entry.positive_summary,
            negative_summary=entry.negative_summary,
            suggestions=list(entry.suggestions),
        )

    async def answer_question(self, texts: Sequence[str], question: str) -> str:
        """Free-form answer to one question about the reviews."""
        data = await self.chat_json(
            ANSWER_PROMPT,
            f"Question: {question}\n\nReviews:\n{_bullets(texts)}",
            temperature=PromptConstants.ANSWER_TEMPERATURE,
            max_tokens=PromptConstants.ANSWER_MAX_TOKENS,
        )
        result = _validate(AnswerResponse, data, AnalysisError, ErrorConstants.ANSWER_FAILED)
        return result.answer

    async def draft_reply(self, review: Review) -> str:
        """Draft a public reply to one guest review."""
        data = await self.chat_json(
            REPLY_PROMPT,
            f"Sentiment: {review.sentiment.value}\nTopic: {review.topic.value}\n\nReview: {review.text}",
            temperature=PromptConstants.REPLY_TEMPERATURE,
            max_tokens=PromptConstants.REPLY_MAX_TOKENS,
        )
        result = _validate(ReplyResponse, data, AnalysisError, ErrorConstants.REPLY_FAILED)
        return result.reply


class FallbackLLMService:
    """Fallback LLM service using simple rules."""

    POSITIVE_WORDS = ["great", "good", "excellent", "amazing", "love", "loved", "perfect",
                      "best", "friendly", "clean", "comfortable", "delicious", "seamless", "impressed"]
    NEGATIVE_WORDS = ["bad", "terrible", "awful", "hate", "worst", "disappointing", "disappointment",
                      "poor", "rude", "slow", "cold", "dirty", "overcharged", "nightmare", "frustrating"]

    TOPIC_KEYWORDS = {
        Topic.RESERVATION: ["reservation", "booking", "booked", "check-in", "checkin", "room type"],
        Topic.MANAGEMENT_SERVICE: ["staff", "management", "manager", "service", "front desk", "concierge", "complaint"],
        Topic.FOOD: ["food", "breakfast", "dinner", "restaurant", "meal", "buffet", "pasta", "menu"],
        Topic.PAYMENT: ["payment", "paid", "charge", "charged", "bill", "invoice", "refund", "card", "receipt"],
    }

    def __init__(self):
        logger.info("Using fallback LLM service")

    def _sentiment(self, text: str) -> Sentiment:
        text_lower = text.lower()
        pos_count = sum(1 for word in self.POSITIVE_WORDS if word in text_lower)
        neg_count = sum(1 for word in self.NEGATIVE_WORDS if word in text_lower)

        if pos_count == 0 and neg_count == 0:
            return Sentiment.OTHER
        if pos_count > neg_count:
            return Sentiment.BEST if pos_count >= 2 and neg_count == 0 else Sentiment.GOOD
        if neg_count > pos_count:
            return Sentiment.BAD if pos_count == 0 else Sentiment.FARE
        return Sentiment.FARE

    def _topic(self, text: str) -> Topic:
        text_lower = text.lower()
        scores = {topic: sum(1 for word in words if word in text_lower)
                  for topic, words in self.TOPIC_KEYWORDS.items()}
        best = max(scores, key=scores.get)
        return best if scores[best] > 0 else Topic.OTHER

    async def classify_reviews(self, texts: Sequence[str]) -> List[ClassifiedReview]:
        """Keyword-based sentiment and topic."""
        results = []
        for i, text in enumerate(texts):
            sentiment = self._sentiment(text)
            results.append(ClassifiedReview(
                id=i,
                text=text,
                rating=RATING_MAP[sentiment],
                sentiment=sentiment,
                topic=self._topic(text),
            ))
        return results

    async def generate_summary(self, texts: Sequence[str]) -> SummaryResult:
        """Counts-based summary."""
        labels = [self._sentiment(t) for t in texts]
        positive = sum(1 for s in labels if s in (Sentiment.BEST, Sentiment.GOOD))
        negative = sum(1 for s in labels if s in (Sentiment.FARE, Sentiment.BAD))
        summary = (f"{len(texts)} reviews analyzed without an AI model: "
                   f"{positive} lean positive and {negative} lean negative.")
        positives = [t for t, s in zip(texts, labels) if s == Sentiment.BEST][:3]
        return SummaryResult(
            consolidated_review=summary,
            key_positives="\n".join(f"- {t}" for t in positives),
        )

    async def generate_suggestions(self, texts: Sequence[str]) -> List[TopicSuggestionGroup]:
        """One generic suggestion per topic with negative reviews."""
        groups = []
        for text in texts:
            if self._sentiment(text) in (Sentiment.FARE, Sentiment.BAD):
                topic = self._topic(text)
                groups.append(TopicSuggestionGroup(
                    topic=topic,
                    suggestions=[f"Review recent {topic.value.lower()} complaints with the team."],
                ))
        return groups

    async def generate_topic_analysis(self, texts: Sequence[str], topic: Topic) -> TopicAnalysis:
        """Placeholder-style analysis based on sentiment counts."""
        labels = [self._sentiment(t) for t in texts]
        has_positive = any(s in (Sentiment.BEST, Sentiment.GOOD) for s in labels)
        has_negative = any(s in (Sentiment.FARE, Sentiment.BAD) for s in labels)
        return TopicAnalysis(
            topic=topic,
            positive_summary=(f"Some guests were happy with {topic.value.lower()}."
                              if has_positive else PlaceholderConstants.NO_POSITIVE_FEEDBACK),
            negative_summary=(f"Some guests had {topic.value.lower()} issues."
                              if has_negative else PlaceholderConstants.NO_NEGATIVE_FEEDBACK),
            suggestions=[f"Address {topic.value} issues promptly."] if has_negative else [],
        )

    async def answer_question(self, texts: Sequence[str], question: str) -> str:
        """Fallback answer - no model available."""
        logger.warning("Fallback LLM service asked a question - no actual LLM available")
        return "Answering questions requires an OpenAI API key (set OPENAI_API_KEY)."

    async def draft_reply(self, review: Review) -> str:
        """Template reply chosen by sentiment."""
        if review.is_negative:
            return ("Thank you for your feedback. We are sorry your stay did not meet expectations "
                    f"and have shared your comments about {review.topic.value.lower()} with our team.")
        return "Thank you for taking the time to share your experience. We look forward to welcoming you back!"
