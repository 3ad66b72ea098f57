"""
Reference Indexer - Word-Form Lookup Index

Builds the exact-string index from normalized word-forms to the reference
rows they occur in. One row may contribute several forms and one form may
point at several rows (homographs, multiple senses).
"""

import re
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple
import logging

from .models import ReferenceEntry
from .schema_detector import ReferenceSchema, SchemaDetectionResult

logger = logging.getLogger(__name__)

_FORM_SEPARATORS = re.compile(r'[,\s]+')
_FREQUENCY_ENTRY = re.compile(r'^([^(]+)(?:\s*\(\d+\))?')


def normalize_form(form: Any) -> str:
    """Lowercase and trim; the only normalization the index applies"""
    if form is None:
        return ''
    return str(form).lower().strip()


class ReferenceIndex:
    """
    Read-only mapping from word-form to reference row positions

    Positions keep insertion order, so lookups return rows in file order.
    """

    def __init__(self, entries: Dict[str, Tuple[int, ...]]):
        self._entries = entries

    def lookup(self, form: str) -> Tuple[int, ...]:
        """Row positions for an already-normalized form (empty if unknown)"""
        return self._entries.get(form, ())

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def items(self) -> Iterator[Tuple[str, Tuple[int, ...]]]:
        return iter(self._entries.items())

    def positions(self) -> List[int]:
        """Every distinct row position referenced by the index"""
        return sorted({p for rows in self._entries.values() for p in rows})

    def __contains__(self, form: str) -> bool:
        return form in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ReferenceIndex):
            return NotImplemented
        return self._entries == other._entries


@dataclass
class ReferenceData:
    """Loaded reference dictionary: rows, index and detected layout"""
    entries: List[ReferenceEntry]
    index: ReferenceIndex
    detection: SchemaDetectionResult
    file_type: str = 'CSV'

    @property
    def schema(self) -> ReferenceSchema:
        return self.detection.schema

    def entry_at(self, position: int) -> ReferenceEntry:
        return self.entries[position]


# ===== Word-Form Extraction =====

def extract_word_forms(cell: Any, schema: ReferenceSchema) -> List[str]:
    """
    Raw word-forms held by one reference cell

    Args:
        cell: Value of the schema's word column
        schema: Detected reference schema

    Returns:
        Forms in cell order (not yet deduplicated)
    """
    if cell is None or cell == '':
        return []

    text = str(cell)

    if schema == ReferenceSchema.MORPHEME:
        return [text]

    if schema == ReferenceSchema.WORD_FORMS:
        return [form for form in _FORM_SEPARATORS.split(text.lower()) if form.strip()]

    forms = []
    for entry in text.lower().split(','):
        match = _FREQUENCY_ENTRY.match(entry.strip())
        if match:
            forms.append(match.group(1).strip())
    return forms


def build_reference_index(
    entries: Sequence[ReferenceEntry],
    detection: SchemaDetectionResult
) -> ReferenceIndex:
    """
    Index every word-form of every reference row

    Args:
        entries: Reference rows in file order
        detection: Schema detection result naming the word column

    Returns:
        ReferenceIndex keyed by lowercased, trimmed form
    """
    index: Dict[str, List[int]] = OrderedDict()

    for entry in entries:
        cell = entry.get(detection.word_column)
        for form in extract_word_forms(cell, detection.schema):
            key = normalize_form(form)
            if key:
                index.setdefault(key, []).append(entry.position)

    logger.info(
        f"Indexed {len(index)} word forms from {len(entries)} reference entries "
        f"({detection.schema.value} schema)"
    )

    return ReferenceIndex({key: tuple(rows) for key, rows in index.items()})
