"""End-to-end pipeline tests with a fake LLM service."""

import io

import pytest

from guestpulse.core.errors import ClassificationError, InvalidFileError, UnknownError
from guestpulse.core.models import ParsedRecord, Sentiment, Topic
from guestpulse.services.pipeline import ReviewAnalysisPipeline
from guestpulse.utils.mock_data import mock_reviews


def _upload(text):
    return io.BytesIO(text.encode("utf-8"))


class TestReviewAnalysisPipeline:
    """Parse, classify, aggregate and summarize."""

    @pytest.fixture(autouse=True)
    def _pipeline(self, fake_llm):
        self.llm = fake_llm
        self.llm.labels.update({
            "Great stay!": (Sentiment.BEST, Topic.OTHER),
            "Terrible service": (Sentiment.BAD, Topic.MANAGEMENT_SERVICE),
        })
        self.pipeline = ReviewAnalysisPipeline(self.llm, batch_size=50)

    def test_csv_upload_end_to_end(self):
        source = _upload("Review,Month\nGreat stay!,Jan\nTerrible service,Feb\n")
        state = self.pipeline.analyze_upload(source, "reviews.csv")

        assert 1 <= state.overall_rating <= 5
        assert state.overall_rating == 3.0
        assert [(p.month, p.avg_rating) for p in state.sentiment_trend] == [("Jan", 5.0), ("Feb", 1.0)]
        assert [r.sentiment for r in state.reviews] == [Sentiment.BEST, Sentiment.BAD]
        assert state.consolidated_review == "2 reviews."
        assert self.llm.calls["classify"] == 1

        management = next(i for i in state.detailed_analysis if i.topic == Topic.MANAGEMENT_SERVICE)
        assert (management.total, management.negative) == (1, 1)

    def test_invalid_upload_makes_no_llm_call(self):
        with pytest.raises(InvalidFileError):
            self.pipeline.analyze_upload(_upload("Review,Month\n"), "reviews.csv")
        assert sum(self.llm.calls.values()) == 0

    def test_taxonomy_errors_pass_through(self):
        async def broken(texts):
            raise ClassificationError()

        self.llm.classify_reviews = broken
        with pytest.raises(ClassificationError):
            self.pipeline.analyze_records([ParsedRecord(id=0, text="Nice", month="Jan")])

    def test_unexpected_errors_become_unknown(self):
        async def broken(texts):
            raise RuntimeError("connection reset")

        self.llm.generate_summary = broken
        with pytest.raises(UnknownError) as exc_info:
            self.pipeline.analyze_records([ParsedRecord(id=0, text="Nice", month="Jan")])
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "connection reset" in exc_info.value.message

    def test_ask_sends_every_review(self):
        answer = self.pipeline.ask(mock_reviews(), "What about breakfast?")
        assert answer == "Answer to: What about breakfast?"
        assert self.llm.calls["answer"] == 1

    def test_draft_reply(self):
        review = mock_reviews()[2]
        assert self.pipeline.draft_reply(review) == "Thanks for review 2."
