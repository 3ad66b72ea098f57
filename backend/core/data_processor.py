"""
Data Processor - Delimited Text Parsing and Row Normalization

Turns pasted or uploaded CSV/TSV text into typed engine records:
- Delimiter sniffing (tabs vs. commas on the first line)
- Encoding detection for uploaded bytes (chardet)
- Tokenization delegated to pandas
- Reference rows -> ReferenceEntry, word-list rows -> InputRecord
"""

import re
from io import StringIO
from typing import Any, Dict, List, Optional, Tuple
import logging

import chardet
import pandas as pd

from .errors import DelimitedTextParseError, EmptyInputError, MissingWordColumnError
from .models import Frequency, InputRecord, ReferenceEntry
from .schema_detector import SchemaDetectionResult, SchemaDetector

logger = logging.getLogger(__name__)

FILE_TYPES = {'\t': 'TSV', ',': 'CSV'}

WORD_HEADERS = {'word'}
FREQUENCY_HEADERS = {'freq', 'frequency'}

_INT_PATTERN = re.compile(r'^[-+]?\d+$')
_FLOAT_PATTERN = re.compile(r'^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$')


def detect_delimiter(text: str) -> str:
    """Tab if the first line has more tabs than commas, comma otherwise"""
    first_line = text.split('\n')[0]
    return '\t' if first_line.count('\t') > first_line.count(',') else ','


def coerce_frequency(value: Any) -> Frequency:
    """
    Convert a frequency cell to a number where it looks like one

    Blank cells become 0; non-numeric text is returned unchanged.
    """
    if value is None:
        return 0
    if isinstance(value, (int, float)):
        return value

    text = str(value).strip()
    if not text:
        return 0
    if _INT_PATTERN.match(text):
        return int(text)
    if _FLOAT_PATTERN.match(text):
        return float(text)
    return text


def _clean_cell(value: Any) -> Any:
    """NaN -> None, strings stripped"""
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if isinstance(value, str):
        return value.strip()
    return value


def _optional_text(value: Any) -> Optional[str]:
    value = _clean_cell(value)
    if value is None or value == '':
        return None
    return str(value)


class DataProcessor:
    """
    Parser for reference dictionaries and word lists

    Both inputs are delimited text with a header row. Blank lines are skipped
    and every cell is read as text; callers decide which columns to coerce.
    """

    def __init__(self, schema_detector: Optional[SchemaDetector] = None):
        self.schema_detector = schema_detector or SchemaDetector()
        self.fallback_encodings = ['utf-8', 'cp1252', 'latin-1']

    # ===== Decoding =====

    def decode_upload(self, raw: bytes) -> str:
        """
        Decode uploaded file bytes to text

        UTF-8 (with or without BOM) is tried first; otherwise the encoding
        is detected with chardet, then common encodings are tried in turn.

        Args:
            raw: File content

        Returns:
            Decoded text
        """
        try:
            return raw.decode('utf-8-sig')
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(raw[:10000]).get('encoding')
        logger.info(f"Detected encoding: {detected}")

        for encoding in [detected] + self.fallback_encodings:
            if not encoding:
                continue
            try:
                return raw.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.info(f"Decoding with {encoding} failed, trying next encoding")
                continue

        # latin-1 decodes any byte sequence, so this is unreachable in practice
        raise DelimitedTextParseError('Unable to decode uploaded file with any known encoding.')

    # ===== Tokenization =====

    def parse_delimited_text(
        self,
        text: str,
        delimiter: Optional[str] = None,
        empty_message: str = 'Input appears to be empty.'
    ) -> Tuple[pd.DataFrame, str]:
        """
        Parse delimited text with a header row into a DataFrame

        Args:
            text: Raw CSV/TSV text
            delimiter: Optional delimiter override (sniffed when omitted)
            empty_message: Message for EmptyInputError

        Returns:
            Tuple of (DataFrame with string cells, file type 'CSV' or 'TSV')

        Raises:
            EmptyInputError: If the text is blank or has no data rows
            DelimitedTextParseError: If pandas rejects the text
        """
        if text is None or not text.strip():
            raise EmptyInputError(empty_message)

        delimiter = delimiter or detect_delimiter(text)
        file_type = FILE_TYPES.get(delimiter, 'CSV')

        try:
            df = pd.read_csv(
                StringIO(text),
                sep=delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
            )
        except pd.errors.EmptyDataError:
            raise EmptyInputError(empty_message)
        except pd.errors.ParserError as e:
            logger.error(f"Failed to parse {file_type} text: {e}")
            raise DelimitedTextParseError(str(e)) from e

        df = self._clean_dataframe(df)

        if len(df) == 0:
            raise EmptyInputError(empty_message)

        logger.info(f"Parsed {file_type}: {len(df)} rows, {len(df.columns)} columns")
        return df, file_type

    def _clean_dataframe(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Basic DataFrame cleaning

        - Strip whitespace from column names
        - Strip whitespace from string values

        Blank lines are skipped by the tokenizer; rows of empty cells such
        as ",," are kept and become rows with an empty word.
        """
        df.columns = [str(col).strip() for col in df.columns]

        for col in df.columns:
            df[col] = df[col].apply(_clean_cell)

        return df.reset_index(drop=True)

    # ===== Reference Data =====

    def parse_reference_text(
        self,
        text: str
    ) -> Tuple[List[ReferenceEntry], SchemaDetectionResult, str]:
        """
        Parse reference dictionary text and detect its schema

        Args:
            text: Raw reference CSV/TSV

        Returns:
            Tuple of (entries, schema detection result, file type)

        Raises:
            EmptyInputError, DelimitedTextParseError, SchemaDetectionError
        """
        df, file_type = self.parse_delimited_text(
            text, empty_message='Reference data appears to be empty.'
        )

        headers = list(df.columns)
        logger.info(f"Reference headers detected: {headers}")
        detection = self.schema_detector.detect(headers, file_type=file_type)

        entries = self.build_reference_entries(df, detection)
        return entries, detection, file_type

    def build_reference_entries(
        self,
        df: pd.DataFrame,
        detection: SchemaDetectionResult
    ) -> List[ReferenceEntry]:
        """Map DataFrame rows onto ReferenceEntry records"""
        known = {
            original: canonical
            for canonical, original in detection.columns.items()
        }

        entries = []
        for position, row in enumerate(df.to_dict('records')):
            fields: Dict[str, Any] = {}
            extra: Dict[str, Any] = {}
            for column, value in row.items():
                if column in known:
                    fields[known[column]] = value
                else:
                    extra[column] = _clean_cell(value)

            entries.append(ReferenceEntry(
                position=position,
                lemma=_optional_text(fields.get('lemma')) or '',
                part_of_speech=_optional_text(fields.get('pos')),
                gloss=_optional_text(fields.get('gloss')),
                morphemes=_optional_text(fields.get('morphemes')),
                extra=extra,
            ))

        return entries

    # ===== Word List =====

    def parse_word_list_text(self, text: str) -> List[InputRecord]:
        """
        Parse the user's word list

        Args:
            text: CSV/TSV with a Word column and optional Freq/Frequency column

        Returns:
            InputRecords in row order

        Raises:
            EmptyInputError, DelimitedTextParseError, MissingWordColumnError
        """
        df, _ = self.parse_delimited_text(text, empty_message='CSV appears to be empty.')
        return self.build_input_records(df)

    def build_input_records(self, df: pd.DataFrame) -> List[InputRecord]:
        """Map DataFrame rows onto InputRecords"""
        headers = list(df.columns)
        word_column = next((h for h in headers if h.lower() in WORD_HEADERS), None)
        if word_column is None:
            raise MissingWordColumnError(headers)

        frequency_column = next((h for h in headers if h.lower() in FREQUENCY_HEADERS), None)

        records = []
        for position, row in enumerate(df.to_dict('records')):
            word = _clean_cell(row.get(word_column))
            frequency = row.get(frequency_column) if frequency_column else None

            extra = {
                column: _clean_cell(value)
                for column, value in row.items()
                if column not in (word_column, frequency_column)
            }

            records.append(InputRecord(
                position=position,
                word='' if word is None else str(word),
                frequency=coerce_frequency(_clean_cell(frequency)),
                extra=extra,
            ))

        logger.info(f"Parsed word list: {len(records)} words")
        return records
