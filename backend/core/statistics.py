"""
Statistics Aggregator - Running Match Counts

Counts matched and unmatched words and tallies matches per part of speech.
Counters only ever grow; they are reset together with the word list.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .models import UNKNOWN_POS, MatchResult


@dataclass
class MatchStatistics:
    """Cumulative statistics for one word-list session"""
    total: int = 0
    matched: int = 0
    unmatched: int = 0
    by_part_of_speech: Dict[str, int] = field(default_factory=dict)

    @property
    def processed(self) -> int:
        return self.matched + self.unmatched

    @property
    def matched_percent(self) -> int:
        return round(self.matched / self.processed * 100) if self.processed else 0

    @property
    def unmatched_percent(self) -> int:
        return round(self.unmatched / self.processed * 100) if self.processed else 0

    def record(self, result: MatchResult):
        """Count one result; every match adds to its POS tally"""
        if result.matches:
            self.matched += 1
            for match in result.matches:
                pos = match.part_of_speech or UNKNOWN_POS
                self.by_part_of_speech[pos] = self.by_part_of_speech.get(pos, 0) + 1
        else:
            self.unmatched += 1

    def record_batch(self, results: Iterable[MatchResult]):
        for result in results:
            self.record(result)

    def merge(self, other: 'MatchStatistics'):
        """Add another set of counts (total is left unchanged)"""
        self.matched += other.matched
        self.unmatched += other.unmatched
        for pos, count in other.by_part_of_speech.items():
            self.by_part_of_speech[pos] = self.by_part_of_speech.get(pos, 0) + count

    def reset(self, total: int = 0):
        self.total = total
        self.matched = 0
        self.unmatched = 0
        self.by_part_of_speech = {}

    def pos_distribution(self, limit: int = None) -> List[Dict]:
        """
        Part-of-speech counts sorted by frequency

        Args:
            limit: Optional maximum number of entries (the chart shows 10)

        Returns:
            List of {'pos', 'count', 'percentage'} dicts, percentage relative
            to the number of matched words
        """
        distribution = [
            {
                'pos': pos,
                'count': count,
                'percentage': round(count / self.matched * 100) if self.matched else 0,
            }
            for pos, count in self.by_part_of_speech.items()
        ]
        distribution.sort(key=lambda item: item['count'], reverse=True)
        return distribution[:limit] if limit else distribution

    def to_dict(self) -> Dict:
        return {
            'total': self.total,
            'processed': self.processed,
            'matched': self.matched,
            'unmatched': self.unmatched,
            'matched_percent': self.matched_percent,
            'unmatched_percent': self.unmatched_percent,
            'by_part_of_speech': dict(self.by_part_of_speech),
        }
