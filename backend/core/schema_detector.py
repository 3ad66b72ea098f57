"""
Schema Detector - Reference Dictionary Layout Detection

Classifies the column layout of a reference lemma table so the indexer knows
where the word-forms of each row live. Three layouts are recognized:
- Morpheme:  Word, Frequency, Lemma, POS, Gloss, Morphemes
- Word forms: Word forms, Lemma, POS, Gloss
- Frequency annotated: Words (Frequency), Lemma

Headers are compared case-insensitively. The word-forms and frequency
columns are matched by substring, all other columns exactly.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional
import logging

from .errors import SchemaDetectionError

logger = logging.getLogger(__name__)


class ReferenceSchema(str, Enum):
    """Recognized reference layouts, in detection priority order"""
    MORPHEME = "morpheme"
    WORD_FORMS = "word_forms"
    FREQUENCY_ANNOTATED = "frequency_annotated"


# ===== Header Requirements =====

# Per schema: (header that holds the word-forms, matched by substring?)
WORD_COLUMN_RULES = {
    ReferenceSchema.MORPHEME: ('word', False),
    ReferenceSchema.WORD_FORMS: ('word forms', True),
    ReferenceSchema.FREQUENCY_ANNOTATED: ('words (frequency)', True),
}

REQUIRED_EXACT_HEADERS = {
    ReferenceSchema.MORPHEME: ['word', 'frequency', 'lemma', 'pos', 'gloss', 'morphemes'],
    ReferenceSchema.WORD_FORMS: ['lemma', 'pos', 'gloss'],
    ReferenceSchema.FREQUENCY_ANNOTATED: ['lemma'],
}

# Shown to users when nothing matches
EXPECTED_HEADERS: Dict[str, List[str]] = {
    'New format': ['Word', 'Frequency', 'Lemma', 'POS', 'Gloss', 'Morphemes'],
    'TSV format': ['Word forms', 'Lemma', 'POS', 'Gloss'],
    'CSV format': ['Words (Frequency)', 'Lemma'],
}

# Known fields copied onto ReferenceEntry when present
ENTRY_FIELDS = ['lemma', 'pos', 'gloss', 'morphemes']


@dataclass
class SchemaDetectionResult:
    """Detected schema plus the original header names it resolved to"""
    schema: ReferenceSchema
    word_column: str
    columns: Dict[str, str] = field(default_factory=dict)  # canonical -> original header
    also_matched: List[ReferenceSchema] = field(default_factory=list)

    def column_for(self, canonical: str) -> Optional[str]:
        return self.columns.get(canonical)


class SchemaDetector:
    """Detects which reference layout a set of headers follows"""

    def __init__(self):
        self.priority = [
            ReferenceSchema.MORPHEME,
            ReferenceSchema.WORD_FORMS,
            ReferenceSchema.FREQUENCY_ANNOTATED,
        ]

    def detect(self, headers: List[str], file_type: Optional[str] = None) -> SchemaDetectionResult:
        """
        Classify reference headers

        Args:
            headers: Column headers as they appear in the source
            file_type: 'CSV' or 'TSV', used in the error message

        Returns:
            SchemaDetectionResult for the highest-priority matching schema

        Raises:
            SchemaDetectionError: If no schema matches
        """
        matched = self.matching_schemas(headers)

        if not matched:
            logger.warning(f"No reference schema matches headers: {headers}")
            raise SchemaDetectionError(headers, EXPECTED_HEADERS, file_type)

        schema = matched[0]
        if len(matched) > 1:
            logger.info(
                f"Headers satisfy several schemas {[s.value for s in matched]}, "
                f"using {schema.value}"
            )

        pattern, is_substring = WORD_COLUMN_RULES[schema]
        word_column = self._find_header(headers, pattern, is_substring)

        columns = {}
        for canonical in ENTRY_FIELDS:
            original = self._find_header(headers, canonical, False)
            if original is not None:
                columns[canonical] = original

        logger.info(f"Detected reference schema: {schema.value} (word column: {word_column!r})")

        return SchemaDetectionResult(
            schema=schema,
            word_column=word_column,
            columns=columns,
            also_matched=matched[1:],
        )

    def matching_schemas(self, headers: List[str]) -> List[ReferenceSchema]:
        """Every schema the headers satisfy, in priority order"""
        return [schema for schema in self.priority if self._matches(headers, schema)]

    def _matches(self, headers: List[str], schema: ReferenceSchema) -> bool:
        pattern, is_substring = WORD_COLUMN_RULES[schema]
        if self._find_header(headers, pattern, is_substring) is None:
            return False

        return all(
            self._find_header(headers, required, False) is not None
            for required in REQUIRED_EXACT_HEADERS[schema]
        )

    @staticmethod
    def _find_header(headers: List[str], pattern: str, is_substring: bool) -> Optional[str]:
        """First header equal to (or containing) pattern, case-insensitively"""
        for header in headers:
            header_lower = str(header).strip().lower()
            if is_substring and pattern in header_lower:
                return header
            if not is_substring and header_lower == pattern:
                return header
        return None
