"""
Shared fixtures for the lemma matcher tests
"""

from typing import List, Sequence

import pytest

from backend.core.data_processor import DataProcessor
from backend.core.reference_indexer import ReferenceData, build_reference_index

MORPHEME_HEADER = ['Word', 'Frequency', 'Lemma', 'POS', 'Gloss', 'Morphemes']


def morpheme_reference_text(rows: Sequence[Sequence[str]]) -> str:
    """TSV text in the Word/Frequency/Lemma/POS/Gloss/Morphemes layout"""
    lines = ['\t'.join(MORPHEME_HEADER)]
    lines.extend('\t'.join(row) for row in rows)
    return '\n'.join(lines) + '\n'


def word_list_text(words: List[str]) -> str:
    return 'Word\n' + '\n'.join(words) + '\n'


def load_reference(text: str) -> ReferenceData:
    entries, detection, file_type = DataProcessor().parse_reference_text(text)
    return ReferenceData(
        entries=entries,
        index=build_reference_index(entries, detection),
        detection=detection,
        file_type=file_type,
    )


@pytest.fixture
def processor():
    return DataProcessor()


@pytest.fixture
def morpheme_text():
    return morpheme_reference_text([
        ('ორი', '5', 'ორი', 'NUM', 'two', 'ორ-ი'),
        ('სახლი', '12', 'სახლი', 'NOUN', 'house', 'სახლ-ი'),
        ('წერს', '3', 'წერა', 'VERB', 'write', 'წერ-ს'),
    ])
