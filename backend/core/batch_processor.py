"""
Batch Processor - Incremental Word-List Matching

Processes a parsed word list in fixed-size batches instead of one pass, so
large lists can be matched step by step with the caller deciding when the
next batch runs. Each batch is atomic: its results and statistics are
committed to the session only after every word in it was resolved.

Batches run strictly in order starting at 1.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import time

from .errors import BatchOrderError, EmptyInputError, ReferenceNotLoadedError
from .match_resolver import MatchResolver
from .models import MatchResult
from .session import MatchingSession, validate_batch_size
from .statistics import MatchStatistics

logger = logging.getLogger(__name__)


@dataclass
class BatchOutcome:
    """Result of processing one batch"""
    batch_index: int
    start: int
    end: int
    results: List[MatchResult]
    matched: int
    unmatched: int
    has_more: bool
    processing_time: float

    @property
    def size(self) -> int:
        return self.end - self.start


class BatchProcessor:
    """
    Drives the match resolver over a session's word list

    The processor holds no state of its own; every call reads and updates
    the MatchingSession passed in.
    """

    def __init__(self, batch_size: Optional[int] = None):
        """
        Initialize batch processor

        Args:
            batch_size: Optional override applied to sessions before their
                first batch; when omitted the session's own size is used
        """
        self.batch_size = validate_batch_size(batch_size) if batch_size is not None else None

    def batch_range(self, session: MatchingSession, batch_index: int) -> Tuple[int, int]:
        """Half-open row range [start, end) covered by a batch"""
        size = session.batch_size
        start = (batch_index - 1) * size
        end = min(batch_index * size, session.total)
        return start, end

    def has_more_batches(self, session: MatchingSession) -> bool:
        return session.completed_batches * session.batch_size < session.total

    def process_batch(self, session: MatchingSession, batch_index: int) -> BatchOutcome:
        """
        Match one batch of the session's word list

        Args:
            session: Session with loaded reference data and word list
            batch_index: 1-based batch number; must be the next unprocessed one

        Returns:
            BatchOutcome with the batch's MatchResults

        Raises:
            ReferenceNotLoadedError: If no reference data is loaded
            EmptyInputError: If no word list is parsed
            BatchOrderError: If batch_index is not the next batch
        """
        with session.lock:
            self._validate(session, batch_index)
            self._apply_batch_size(session)

            start, end = self.batch_range(session, batch_index)
            start_time = time.time()

            resolver = MatchResolver(session.reference)
            batch_results = []
            for position in range(start, end):
                record = session.records[position]
                batch_results.append(MatchResult(
                    word=record.word,
                    frequency=record.frequency,
                    matches=resolver.find_matches(record.word),
                    original_index=position,
                ))

            batch_stats = MatchStatistics()
            batch_stats.record_batch(batch_results)

            # Commit only after the whole batch resolved
            session.results.extend(batch_results)
            session.statistics.merge(batch_stats)
            session.completed_batches = batch_index
            session.touch()

            outcome = BatchOutcome(
                batch_index=batch_index,
                start=start,
                end=end,
                results=batch_results,
                matched=batch_stats.matched,
                unmatched=batch_stats.unmatched,
                has_more=self.has_more_batches(session),
                processing_time=time.time() - start_time,
            )

        logger.info(
            f"Session {session.session_id}: batch {batch_index}/{session.total_batches} "
            f"rows {start}-{end} matched {outcome.matched}, unmatched {outcome.unmatched} "
            f"({outcome.processing_time:.3f}s)"
        )
        return outcome

    def process_next_batch(self, session: MatchingSession) -> BatchOutcome:
        return self.process_batch(session, session.completed_batches + 1)

    def iter_batches(self, session: MatchingSession) -> Iterator[BatchOutcome]:
        """
        Process the remaining batches one at a time

        The generator suspends after every batch, so the caller's loop can
        interleave other work or stop early.
        """
        while self.has_more_batches(session):
            yield self.process_next_batch(session)

    def process_all(self, session: MatchingSession) -> List[MatchResult]:
        for _ in self.iter_batches(session):
            pass
        return session.results

    def progress(self, session: MatchingSession) -> Dict:
        return {
            'completed_batches': session.completed_batches,
            'total_batches': session.total_batches,
            'processed': session.processed_count,
            'total': session.total,
            'progress_percent': session.progress_percent,
            'has_more': self.has_more_batches(session),
            'next_batch_size': min(session.batch_size, session.total - session.processed_count),
        }

    # ===== Helpers =====

    def _apply_batch_size(self, session: MatchingSession):
        if self.batch_size is not None and session.completed_batches == 0:
            session.batch_size = self.batch_size

    def _validate(self, session: MatchingSession, batch_index: int):
        if not session.reference_loaded:
            raise ReferenceNotLoadedError()

        if session.total == 0:
            raise EmptyInputError('No word list has been parsed.')

        if not self.has_more_batches(session):
            raise BatchOrderError(
                batch_index, None,
                f"All {session.total_batches} batches have already been processed."
            )

        expected = session.completed_batches + 1
        if batch_index != expected:
            raise BatchOrderError(
                batch_index, expected,
                f"Batch {batch_index} requested out of order; next batch is {expected}."
            )
