"""
Matching Session - Per-Caller Matching State

Holds everything one user works with: the loaded reference dictionary, the
parsed word list, accumulated results, running statistics and the batch
cursor. Reference data and word-list state are loaded and reset
independently. A failed load or parse leaves the previous state in place.
"""

import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional
import logging

from .data_processor import DataProcessor
from .models import InputRecord, MatchResult
from .reference_indexer import ReferenceData, build_reference_index
from .statistics import MatchStatistics

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


@dataclass
class MatchingSession:
    """Mutable state of one matching workflow"""
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    batch_size: int = DEFAULT_BATCH_SIZE
    reference: Optional[ReferenceData] = None
    records: List[InputRecord] = field(default_factory=list)
    results: List[MatchResult] = field(default_factory=list)
    statistics: MatchStatistics = field(default_factory=MatchStatistics)
    completed_batches: int = 0
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())
    updated_at: datetime = field(default_factory=datetime.now)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    # ===== State Queries =====

    @property
    def reference_loaded(self) -> bool:
        return self.reference is not None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def processed_count(self) -> int:
        return min(self.completed_batches * self.batch_size, self.total)

    @property
    def progress_percent(self) -> int:
        return round(self.processed_count / self.total * 100) if self.total else 0

    @property
    def total_batches(self) -> int:
        return -(-self.total // self.batch_size) if self.total else 0

    def touch(self):
        self.updated_at = datetime.now()

    # ===== Reference Data =====

    def load_reference(self, text: str, processor: Optional[DataProcessor] = None) -> ReferenceData:
        """
        Parse, classify and index reference dictionary text

        Args:
            text: Raw reference CSV/TSV
            processor: Optional DataProcessor (a default one is created)

        Returns:
            The loaded ReferenceData

        Raises:
            EmptyInputError, DelimitedTextParseError, SchemaDetectionError
        """
        processor = processor or DataProcessor()
        entries, detection, file_type = processor.parse_reference_text(text)
        index = build_reference_index(entries, detection)

        reference = ReferenceData(
            entries=entries,
            index=index,
            detection=detection,
            file_type=file_type,
        )
        self.reference = reference
        self.touch()

        logger.info(
            f"Session {self.session_id}: {file_type} data loaded successfully "
            f"with {len(entries)} entries"
        )
        return reference

    def reset_reference(self):
        self.reference = None
        self.touch()
        logger.info(f"Session {self.session_id}: reference data reset")

    # ===== Word List =====

    def load_word_list(
        self,
        text: str,
        batch_size: Optional[int] = None,
        processor: Optional[DataProcessor] = None
    ) -> List[InputRecord]:
        """
        Parse a word list and start a fresh results set

        Raises:
            EmptyInputError, DelimitedTextParseError, MissingWordColumnError
        """
        processor = processor or DataProcessor()
        records = processor.parse_word_list_text(text)

        if batch_size is not None:
            self.batch_size = validate_batch_size(batch_size)

        self.records = records
        self._reset_results(total=len(records))

        logger.info(
            f"Session {self.session_id}: word list parsed, {len(records)} words "
            f"in {self.total_batches} batches of {self.batch_size}"
        )
        return records

    def set_batch_size(self, batch_size: int):
        """Change the batch size; only allowed before the first batch runs"""
        batch_size = validate_batch_size(batch_size)
        if self.completed_batches > 0 and batch_size != self.batch_size:
            raise ValueError('Batch size cannot change after batches have been processed.')
        self.batch_size = batch_size
        self.touch()

    def reset_input(self):
        """Discard the word list, results and statistics; keep reference data"""
        self.records = []
        self._reset_results(total=0)
        logger.info(f"Session {self.session_id}: word list and results reset")

    def _reset_results(self, total: int):
        self.results = []
        self.statistics = MatchStatistics(total=total)
        self.completed_batches = 0
        self.touch()

    def summary(self) -> Dict:
        return {
            'session_id': self.session_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at.isoformat(),
            'reference_loaded': self.reference_loaded,
            'reference_entries': len(self.reference.entries) if self.reference else 0,
            'reference_schema': self.reference.schema.value if self.reference else None,
            'total_words': self.total,
            'batch_size': self.batch_size,
            'completed_batches': self.completed_batches,
            'total_batches': self.total_batches,
            'processed_count': self.processed_count,
            'progress_percent': self.progress_percent,
        }


def validate_batch_size(batch_size: int) -> int:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size < 1:
        raise ValueError(f"Batch size must be a positive integer, got {batch_size!r}")
    return batch_size
