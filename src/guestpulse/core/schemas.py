"""Response schemas for every LLM call.

Each call has its own model. Responses are validated against these before
anything enters the data model; a response that does not match is rejected,
never coerced.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Sentiment, Topic


class _Response(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ClassifiedReview(_Response):
    """One review as labelled by the classification call."""
    id: int = Field(description="Index of the review within the submitted batch")
    text: str = ""
    rating: float = Field(ge=0.0, le=5.0)
    sentiment: Sentiment
    topic: Optional[Topic] = None


class ClassificationResponse(_Response):
    analyzed_reviews: List[ClassifiedReview] = Field(alias="analyzedReviews")


class SummaryResponse(_Response):
    consolidated_review: str = Field(alias="consolidatedReview")
    key_positives: str = Field("", alias="keyPositives")


class SuggestionGroupSchema(_Response):
    topic: Topic
    suggestions: List[str] = Field(default_factory=list)


class SuggestionsResponse(_Response):
    suggestions: List[SuggestionGroupSchema]


class TopicAnalysisSchema(_Response):
    topic: Topic
    positive_summary: str = Field(alias="positiveSummary")
    negative_summary: str = Field(alias="negativeSummary")
    suggestions: List[str] = Field(default_factory=list)


class TopicAnalysisResponse(_Response):
    detailed_topic_analysis: List[TopicAnalysisSchema] = Field(alias="detailedTopicAnalysis")


class AnswerResponse(_Response):
    answer: str


class ReplyResponse(_Response):
    reply: str
