"""Tests for batch classification."""

import asyncio

import pytest

from guestpulse.core.errors import ClassificationError
from guestpulse.core.models import ParsedRecord, Sentiment, Topic
from guestpulse.core.schemas import ClassifiedReview
from guestpulse.services.classifier import BatchClassifier, chunk_records


def _records(n, rating=None):
    return [ParsedRecord(id=i, text=f"Review number {i}", month="Jan", rating=rating) for i in range(n)]


def test_chunk_records():
    chunks = chunk_records(_records(7), 3)
    assert [len(c) for c in chunks] == [3, 3, 1]
    assert chunks[2][0].id == 6


class TestBatchClassifier:
    """Sequential batching and result merging."""

    def test_120_reviews_make_three_calls(self, fake_llm):
        classifier = BatchClassifier(fake_llm, batch_size=50)
        reviews = asyncio.run(classifier.classify(_records(120)))

        assert fake_llm.calls["classify"] == 3
        assert [len(b) for b in fake_llm.batches] == [50, 50, 20]
        assert sorted(r.id for r in reviews) == list(range(120))
        assert len({r.id for r in reviews}) == 120

    def test_only_one_batch_in_flight(self, fake_llm):
        classifier = BatchClassifier(fake_llm, batch_size=10)
        asyncio.run(classifier.classify(_records(45)))

        assert fake_llm.calls["classify"] == 5
        assert fake_llm.max_in_flight == 1

    def test_batches_are_sent_in_input_order(self, fake_llm):
        classifier = BatchClassifier(fake_llm, batch_size=2)
        asyncio.run(classifier.classify(_records(5)))
        flattened = [text for batch in fake_llm.batches for text in batch]
        assert flattened == [f"Review number {i}" for i in range(5)]

    def test_merged_review_keeps_record_text_and_month(self):
        classifier = BatchClassifier(None, batch_size=10)
        batch = [ParsedRecord(id=0, text="Original text", month="Feb")]
        results = [ClassifiedReview(id=0, text="echoed", rating=1.0,
                                    sentiment=Sentiment.BAD, topic=Topic.FOOD)]
        merged, next_id = classifier.merge_batch(batch, results, 1)

        assert merged[0].text == "Original text"
        assert merged[0].month == "Feb"
        assert merged[0].topic == Topic.FOOD
        assert next_id == 1

    def test_explicit_rating_wins_over_sentiment_mapping(self):
        classifier = BatchClassifier(None, batch_size=10)
        batch = [ParsedRecord(id=0, text="Okay", month="Jan", rating=2.0),
                 ParsedRecord(id=1, text="Superb", month="Jan")]
        results = [ClassifiedReview(id=0, rating=5.0, sentiment=Sentiment.BEST),
                   ClassifiedReview(id=1, rating=3.3, sentiment=Sentiment.BEST)]
        merged, _ = classifier.merge_batch(batch, results, 2)

        assert merged[0].rating == 2.0
        assert merged[1].rating == 5.0

    def test_missing_topic_defaults_to_other(self):
        classifier = BatchClassifier(None, batch_size=10)
        batch = [ParsedRecord(id=0, text="Hm", month="Jan")]
        merged, _ = classifier.merge_batch(batch, [ClassifiedReview(id=0, rating=3, sentiment=Sentiment.OTHER)], 1)
        assert merged[0].topic == Topic.OTHER

    def test_unmapped_and_duplicate_ids_get_synthetic_ids(self):
        classifier = BatchClassifier(None, batch_size=10)
        batch = [ParsedRecord(id=0, text="A", month="Jan"), ParsedRecord(id=1, text="B", month="Jan")]
        results = [
            ClassifiedReview(id=0, text="A", rating=4, sentiment=Sentiment.GOOD),
            ClassifiedReview(id=0, text="A again", rating=4, sentiment=Sentiment.GOOD),
            ClassifiedReview(id=7, text="Stray", rating=1, sentiment=Sentiment.BAD),
        ]
        merged, next_id = classifier.merge_batch(batch, results, 2)

        assert [r.id for r in merged] == [0, 2, 3]
        assert merged[2].text == "Stray"
        assert merged[2].month == ""
        assert next_id == 4

    def test_local_ids_map_within_later_batches(self, fake_llm):
        fake_llm.labels = {"Review number 4": (Sentiment.BAD, Topic.PAYMENT)}
        classifier = BatchClassifier(fake_llm, batch_size=3)
        reviews = asyncio.run(classifier.classify(_records(5)))

        by_id = {r.id: r for r in reviews}
        assert by_id[4].sentiment == Sentiment.BAD
        assert by_id[4].topic == Topic.PAYMENT
        assert by_id[4].text == "Review number 4"

    def test_malformed_batch_aborts(self, fake_llm):
        async def broken(texts):
            raise ClassificationError()

        fake_llm.classify_reviews = broken
        classifier = BatchClassifier(fake_llm, batch_size=50)
        with pytest.raises(ClassificationError):
            asyncio.run(classifier.classify(_records(3)))
