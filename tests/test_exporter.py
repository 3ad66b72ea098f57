"""
Tests for result export
"""

import json

import pytest

from backend.core.exporter import (
    EXPORT_COLUMNS,
    ExportFormat,
    count_morphemes,
    export_results,
    export_rows,
    to_tsv,
)
from backend.core.models import Match, MatchResult, ReferenceEntry

HEADER = 'Word\tFrequency\tLemma\tPOS\tGloss\tMorphemes\tMorpheme_Count'


@pytest.fixture
def results():
    two = ReferenceEntry(position=0, lemma='ორი', part_of_speech='NUM', gloss='two', morphemes='ორ-ი')
    house = ReferenceEntry(position=1, lemma='სახლი', part_of_speech='NOUN', gloss='house')
    return [
        MatchResult(word='ორი', frequency=5, matches=[Match(entry=two)], original_index=0),
        MatchResult(word='xyz', frequency=2.0, matches=[], original_index=1),
        MatchResult(word='სახლს', frequency=1, matches=[Match(entry=house, transliteration_variant=None)],
                    original_index=2),
    ]


class TestCountMorphemes:

    @pytest.mark.parametrize('morphemes, expected', [
        ('ორ-ი', 2), ('სახლ-ებ-ი', 3), ('ჩაი', 1), ('a--b- ', 2),
        ('', 0), ('-', 0), (None, 0), (5, 0),
    ])
    def test_count(self, morphemes, expected):
        assert count_morphemes(morphemes) == expected


class TestTsv:

    def test_matched_rows_only_by_default(self, results):
        lines = to_tsv(results).split('\n')

        assert lines == [
            HEADER,
            'ორი\t5\tორი\tNUM\ttwo\tორ-ი\t2',
            'სახლს\t1\tსახლი\tNOUN\thouse\t\t0',
        ]

    def test_unmatched_rows_included_on_request(self, results):
        lines = to_tsv(results, include_unmatched=True).split('\n')

        assert lines[2] == 'xyz\t2\t\t\t\t\t'
        assert len(lines) == 4

    def test_one_row_per_match(self):
        entries = [ReferenceEntry(position=i, lemma=f'l{i}') for i in range(3)]
        result = MatchResult(word='w', frequency=1, matches=[Match(entry=e) for e in entries],
                             original_index=0)

        assert [row['Lemma'] for row in export_rows([result])] == ['l0', 'l1', 'l2']

    def test_header_only_when_nothing_matched(self):
        assert to_tsv([]) == HEADER


class TestOtherFormats:

    def test_csv(self, results):
        lines = export_results(results, ExportFormat.CSV).splitlines()

        assert lines[0] == ','.join(EXPORT_COLUMNS)
        assert lines[1] == 'ორი,5,ორი,NUM,two,ორ-ი,2'

    def test_json(self, results):
        rows = json.loads(export_results(results, ExportFormat.JSON, include_unmatched=True))

        assert [row['Word'] for row in rows] == ['ორი', 'xyz', 'სახლს']
        assert rows[0]['Morpheme_Count'] == 2
        assert rows[1]['Lemma'] is None
        assert rows[1]['Morpheme_Count'] is None

    def test_tsv_is_default(self, results):
        assert export_results(results) == to_tsv(results)
