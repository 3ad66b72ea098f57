"""
Result Exporter - Tabular Export of Match Results

Flattens match results to one row per match (and optionally one row per
unmatched word) with a morpheme count column. TSV is the primary format,
ready for pasting into a spreadsheet; CSV and JSON go through pandas.
"""

from enum import Enum
from typing import Any, Dict, Iterable, List
import logging

import pandas as pd

from .models import MatchResult

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['Word', 'Frequency', 'Lemma', 'POS', 'Gloss', 'Morphemes', 'Morpheme_Count']


class ExportFormat(str, Enum):
    """Export format enumeration"""
    TSV = "tsv"
    CSV = "csv"
    JSON = "json"


def count_morphemes(morphemes: Any) -> int:
    """Number of non-empty hyphen-separated segments; 0 for non-strings"""
    if not morphemes or not isinstance(morphemes, str):
        return 0
    return len([part for part in morphemes.split('-') if part.strip()])


def _format_value(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_rows(results: Iterable[MatchResult], include_unmatched: bool = False) -> List[Dict]:
    """
    Flatten results into export rows

    Args:
        results: Match results in output order
        include_unmatched: Emit a row with empty match columns for words
            without matches

    Returns:
        List of dicts keyed by EXPORT_COLUMNS
    """
    rows = []
    for result in results:
        if not result.matches:
            if include_unmatched:
                rows.append({
                    'Word': result.word,
                    'Frequency': result.frequency,
                    'Lemma': None,
                    'POS': None,
                    'Gloss': None,
                    'Morphemes': None,
                    'Morpheme_Count': None,
                })
            continue

        for match in result.matches:
            rows.append({
                'Word': result.word,
                'Frequency': result.frequency,
                'Lemma': match.lemma,
                'POS': match.part_of_speech,
                'Gloss': match.gloss,
                'Morphemes': match.morphemes,
                'Morpheme_Count': count_morphemes(match.morphemes),
            })
    return rows


def to_tsv(results: Iterable[MatchResult], include_unmatched: bool = False) -> str:
    """Tab-separated export with a header line"""
    lines = ['\t'.join(EXPORT_COLUMNS)]
    for row in export_rows(results, include_unmatched):
        lines.append('\t'.join(_format_value(row[column]) for column in EXPORT_COLUMNS))
    return '\n'.join(lines)


def to_dataframe(results: Iterable[MatchResult], include_unmatched: bool = False) -> pd.DataFrame:
    df = pd.DataFrame(export_rows(results, include_unmatched), columns=EXPORT_COLUMNS)
    # Unmatched rows leave the count empty; keep the column integral
    df['Morpheme_Count'] = df['Morpheme_Count'].astype('Int64')
    return df


def export_results(
    results: Iterable[MatchResult],
    export_format: ExportFormat = ExportFormat.TSV,
    include_unmatched: bool = False
) -> str:
    """
    Render results in the requested format

    Args:
        results: Match results in output order
        export_format: tsv, csv or json
        include_unmatched: Include rows for words without matches

    Returns:
        Rendered text
    """
    results = list(results)
    logger.info(f"Exporting {len(results)} results as {export_format.value}")

    if export_format == ExportFormat.TSV:
        return to_tsv(results, include_unmatched)

    df = to_dataframe(results, include_unmatched)
    if export_format == ExportFormat.CSV:
        return df.to_csv(index=False)
    return df.to_json(orient='records', force_ascii=False)
