"""
Data Models - Reference Rows, Word-List Records and Match Results

Typed records for the matching engine. Only the fields the engine reads are
typed; every other source column is kept on an ``extra`` map so rows can be
exported back without losing data.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

UNKNOWN_POS = 'Unknown'

Frequency = Union[int, float, str]


# ===== Reference Data =====

@dataclass(frozen=True)
class ReferenceEntry:
    """One row of the reference lemma dictionary"""
    position: int
    lemma: str
    part_of_speech: Optional[str] = None
    gloss: Optional[str] = None
    morphemes: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def pos_label(self) -> str:
        return self.part_of_speech or UNKNOWN_POS

    def get(self, column: str, default: Any = None) -> Any:
        """Value of a passthrough column by its original header"""
        return self.extra.get(column, default)

    def to_dict(self) -> Dict[str, Any]:
        row = dict(self.extra)
        row.update({
            'Lemma': self.lemma,
            'POS': self.part_of_speech,
            'Gloss': self.gloss,
            'Morphemes': self.morphemes,
        })
        return row


# ===== Word List =====

@dataclass(frozen=True)
class InputRecord:
    """One row of the user's word list; position defines output order"""
    position: int
    word: str
    frequency: Frequency = 0
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        row = dict(self.extra)
        row.update({'Word': self.word, 'Freq': self.frequency})
        return row


# ===== Match Results =====

@dataclass(frozen=True)
class Match:
    """
    A reference entry found for a query word

    ``transliteration_variant`` is the Latin variant that produced the match,
    or None when the entry was found by exact lookup.
    """
    entry: ReferenceEntry
    transliteration_variant: Optional[str] = None

    @property
    def lemma(self) -> str:
        return self.entry.lemma

    @property
    def part_of_speech(self) -> Optional[str]:
        return self.entry.part_of_speech

    @property
    def gloss(self) -> Optional[str]:
        return self.entry.gloss

    @property
    def morphemes(self) -> Optional[str]:
        return self.entry.morphemes

    @property
    def is_exact(self) -> bool:
        return self.transliteration_variant is None

    def to_dict(self) -> Dict[str, Any]:
        row = self.entry.to_dict()
        if self.transliteration_variant is not None:
            row['transcriptionVariant'] = self.transliteration_variant
        return row


@dataclass
class MatchResult:
    """Matches for one input word, tagged with its position in the full list"""
    word: str
    frequency: Frequency
    matches: List[Match]
    original_index: int

    @property
    def is_matched(self) -> bool:
        return len(self.matches) > 0
