"""
Matching Errors - Recoverable Error Types

Every error raised while loading reference data, parsing a word list or
processing a batch derives from LemmaMatcherError. None of them is fatal:
the operation that raised is aborted and the session keeps its prior state.
"""

from typing import Dict, List, Optional


class LemmaMatcherError(Exception):
    """Base class for all matching engine errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class EmptyInputError(LemmaMatcherError):
    """Reference or word-list text is blank, or holds no data rows"""


class SchemaDetectionError(LemmaMatcherError):
    """
    Reference headers match none of the known schemas

    Carries the expected header sets so callers can tell the user which
    columns are required.
    """

    def __init__(
        self,
        headers: List[str],
        expected_headers: Dict[str, List[str]],
        file_type: Optional[str] = None
    ):
        self.headers = list(headers)
        self.expected_headers = expected_headers
        self.file_type = file_type or 'Reference data'

        lines = [f"{self.file_type} must have one of these formats:"]
        for label, columns in expected_headers.items():
            quoted = ', '.join(f'"{c}"' for c in columns)
            lines.append(f"- {label}: {quoted} columns")
        super().__init__('\n'.join(lines))


class MissingWordColumnError(LemmaMatcherError):
    """Word list has no Word column"""

    def __init__(self, headers: Optional[List[str]] = None):
        self.headers = list(headers or [])
        super().__init__('CSV must have a "Word" column.')


class DelimitedTextParseError(LemmaMatcherError):
    """Tokenizer rejected the delimited text (bad quoting, ragged rows)"""


class ReferenceNotLoadedError(LemmaMatcherError):
    """Matching was requested before any reference data was loaded"""

    def __init__(self, message: str = 'Reference data has not been loaded.'):
        super().__init__(message)


class BatchOrderError(LemmaMatcherError):
    """Batch requested out of sequence, or past the end of the word list"""

    def __init__(self, requested: int, expected: Optional[int], message: str):
        self.requested = requested
        self.expected = expected
        super().__init__(message)
