"""Batch classification of parsed reviews."""

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

from ..core.config import settings
from ..core.constants import BatchConstants
from ..core.models import RATING_MAP, ParsedRecord, Review, Topic
from ..core.schemas import ClassifiedReview

logger = logging.getLogger(__name__)


def chunk_records(records: Sequence[ParsedRecord], size: int) -> List[List[ParsedRecord]]:
    """Split records into consecutive chunks of at most ``size``."""
    return [list(records[i:i + size]) for i in range(0, len(records), size)]


class BatchClassifier:
    """Classifies records through the LLM one fixed-size batch at a time.

    Batches go through an ordered queue and each request completes before the
    next is sent, which keeps at most one classification call in flight.
    """

    def __init__(self, llm_service, batch_size: Optional[int] = None):
        self.llm_service = llm_service
        self.batch_size = max(BatchConstants.MIN_BATCH_SIZE, batch_size or settings.batch_size)

    async def classify(self, records: Sequence[ParsedRecord]) -> List[Review]:
        """Classify every record; raises ClassificationError on a malformed batch."""
        pending: Deque[List[ParsedRecord]] = deque(chunk_records(records, self.batch_size))
        total_batches = len(pending)
        next_synthetic_id = max((r.id for r in records), default=-1) + 1

        reviews: List[Review] = []
        batch_no = 0
        while pending:
            batch = pending.popleft()
            batch_no += 1
            logger.info(f"Classifying batch {batch_no}/{total_batches} ({len(batch)} reviews)")

            results = await self.llm_service.classify_reviews([r.text for r in batch])
            merged, next_synthetic_id = self.merge_batch(batch, results, next_synthetic_id)
            reviews.extend(merged)

        logger.info(f"Classified {len(reviews)} reviews in {total_batches} batches")
        return reviews

    def merge_batch(self, batch: Sequence[ParsedRecord], results: Sequence[ClassifiedReview],
                    next_synthetic_id: int):
        """Attach classifier output to the batch's records.

        Returns the merged reviews and the next free synthetic id.
        """
        by_local_id: Dict[int, ParsedRecord] = {r.id % self.batch_size: r for r in batch}
        seen = set()
        merged = []

        for result in results:
            record = by_local_id.get(result.id)
            if record is not None and record.id not in seen:
                seen.add(record.id)
                merged.append(self._to_review(result, record.id, record))
                continue

            # unknown or repeated local id: keep the result under a fresh id
            logger.warning(f"Classifier returned unmapped id {result.id}; "
                           f"stored as synthetic id {next_synthetic_id}")
            merged.append(self._to_review(result, next_synthetic_id, None))
            next_synthetic_id += 1

        missing = [r.id for r in batch if r.id not in seen]
        if missing:
            logger.warning(f"Classifier omitted {len(missing)} reviews: {missing}")
        return merged, next_synthetic_id

    @staticmethod
    def _to_review(result: ClassifiedReview, review_id: int,
                   record: Optional[ParsedRecord]) -> Review:
        if record is not None and record.rating is not None:
            rating = record.rating
        else:
            rating = RATING_MAP.get(result.sentiment, 3.0)
        return Review(
            id=review_id,
            text=record.text if record is not None else result.text,
            month=record.month if record is not None else "",
            rating=rating,
            sentiment=result.sentiment,
            topic=result.topic or Topic.OTHER,
        )
