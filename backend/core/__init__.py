"""
Matching engine: transliteration, schema detection, indexing, resolution,
batch processing and export.
"""

from .batch_processor import BatchOutcome, BatchProcessor
from .data_processor import DataProcessor, detect_delimiter
from .errors import (
    BatchOrderError,
    DelimitedTextParseError,
    EmptyInputError,
    LemmaMatcherError,
    MissingWordColumnError,
    ReferenceNotLoadedError,
    SchemaDetectionError,
)
from .exporter import ExportFormat, count_morphemes, export_results
from .match_resolver import MatchResolver
from .models import InputRecord, Match, MatchResult, ReferenceEntry
from .reference_indexer import ReferenceData, ReferenceIndex, build_reference_index
from .schema_detector import ReferenceSchema, SchemaDetectionResult, SchemaDetector
from .session import MatchingSession
from .statistics import MatchStatistics
from .transliteration import contains_georgian, generate_variants, map_character, transliterate

__all__ = [
    'BatchOutcome', 'BatchProcessor',
    'DataProcessor', 'detect_delimiter',
    'BatchOrderError', 'DelimitedTextParseError', 'EmptyInputError', 'LemmaMatcherError',
    'MissingWordColumnError', 'ReferenceNotLoadedError', 'SchemaDetectionError',
    'ExportFormat', 'count_morphemes', 'export_results',
    'MatchResolver',
    'InputRecord', 'Match', 'MatchResult', 'ReferenceEntry',
    'ReferenceData', 'ReferenceIndex', 'build_reference_index',
    'ReferenceSchema', 'SchemaDetectionResult', 'SchemaDetector',
    'MatchingSession',
    'MatchStatistics',
    'contains_georgian', 'generate_variants', 'map_character', 'transliterate',
]
