"""
Tests for delimited text parsing and row normalization
"""

import pytest

from backend.core.data_processor import coerce_frequency, detect_delimiter
from backend.core.errors import (
    DelimitedTextParseError,
    EmptyInputError,
    MissingWordColumnError,
    SchemaDetectionError,
)
from backend.core.match_resolver import MatchResolver
from backend.core.schema_detector import ReferenceSchema
from tests.conftest import load_reference


# ===== Helpers =====

class TestDetectDelimiter:

    def test_tabs(self):
        assert detect_delimiter('Word\tFreq\nა\t1') == '\t'

    def test_commas(self):
        assert detect_delimiter('Word,Freq\nა,1') == ','

    def test_tie_goes_to_comma(self):
        assert detect_delimiter('Word,Freq\tExtra') == ','

    def test_only_first_line_counts(self):
        assert detect_delimiter('Word\tFreq\na,b,c,d') == '\t'


class TestCoerceFrequency:

    @pytest.mark.parametrize('value, expected', [
        ('12', 12), (' 7 ', 7), ('-3', -3), ('1.5', 1.5), ('2e3', 2000.0),
        ('', 0), ('   ', 0), (None, 0), (4, 4),
    ])
    def test_values(self, value, expected):
        assert coerce_frequency(value) == expected

    def test_non_numeric_text_kept(self):
        assert coerce_frequency('many') == 'many'


# ===== Word Lists =====

class TestParseWordList:

    def test_freq_before_word(self, processor):
        records = processor.parse_word_list_text('Freq,Word\n1,ორი\n1,პუმბა\n1,კარაქი')

        assert [r.word for r in records] == ['ორი', 'პუმბა', 'კარაქი']
        assert [r.frequency for r in records] == [1, 1, 1]
        assert [r.position for r in records] == [0, 1, 2]

    def test_headers_are_case_insensitive(self, processor):
        records = processor.parse_word_list_text('word,frequency\nსახლი,3')

        assert records[0].word == 'სახლი'
        assert records[0].frequency == 3

    def test_missing_frequency_defaults_to_zero(self, processor):
        records = processor.parse_word_list_text('Word\nა\nბ')
        assert [r.frequency for r in records] == [0, 0]

    def test_other_columns_pass_through(self, processor):
        records = processor.parse_word_list_text('Word,Freq,Source\nა,2,novel')
        assert records[0].extra == {'Source': 'novel'}

    def test_tab_separated(self, processor):
        records = processor.parse_word_list_text('Word\tFreq\nწიგნი\t10\n')

        assert records[0].word == 'წიგნი'
        assert records[0].frequency == 10

    def test_cells_are_trimmed(self, processor):
        records = processor.parse_word_list_text('Word,Freq\n  ორი  , 4 ')

        assert records[0].word == 'ორი'
        assert records[0].frequency == 4

    def test_blank_lines_skipped(self, processor):
        records = processor.parse_word_list_text('Word\nა\n\nბ\n\n')
        assert [r.word for r in records] == ['ა', 'ბ']

    def test_rows_of_empty_cells_kept(self, processor):
        records = processor.parse_word_list_text('Word,Freq\nა,1\n,\nბ,2\n')

        assert [r.word for r in records] == ['ა', '', 'ბ']
        assert records[1].frequency == 0

    def test_trailing_delimiter_keeps_columns_aligned(self, processor):
        records = processor.parse_word_list_text('Freq,Word\n1,ორი,\n2,სახლი,\n')

        assert [(r.word, r.frequency) for r in records] == [('ორი', 1), ('სახლი', 2)]

    def test_trailing_tab_keeps_columns_aligned(self, processor):
        records = processor.parse_word_list_text('Word\tFreq\nწიგნი\t10\t\n')

        assert records[0].word == 'წიგნი'
        assert records[0].frequency == 10

    def test_missing_word_column(self, processor):
        with pytest.raises(MissingWordColumnError) as exc_info:
            processor.parse_word_list_text('Freq,Term\n1,x')

        assert str(exc_info.value) == 'CSV must have a "Word" column.'
        assert exc_info.value.headers == ['Freq', 'Term']

    @pytest.mark.parametrize('text', ['', '   \n  ', 'Word,Freq\n'])
    def test_empty_input(self, processor, text):
        with pytest.raises(EmptyInputError):
            processor.parse_word_list_text(text)

    def test_unterminated_quote(self, processor):
        with pytest.raises(DelimitedTextParseError):
            processor.parse_word_list_text('Word,Freq\n"ორი,1\n')


# ===== Reference Data =====

class TestParseReference:

    def test_morpheme_reference(self, processor, morpheme_text):
        entries, detection, file_type = processor.parse_reference_text(morpheme_text)

        assert file_type == 'TSV'
        assert detection.schema == ReferenceSchema.MORPHEME
        assert len(entries) == 3

        first = entries[0]
        assert first.position == 0
        assert first.lemma == 'ორი'
        assert first.part_of_speech == 'NUM'
        assert first.gloss == 'two'
        assert first.morphemes == 'ორ-ი'
        assert first.extra == {'Word': 'ორი', 'Frequency': '5'}

    def test_blank_pos_is_unknown(self, processor):
        text = 'Word forms,Lemma,POS,Gloss\nბავშვი,ბავშვი,,child\n'
        entries, _, file_type = processor.parse_reference_text(text)

        assert file_type == 'CSV'
        assert entries[0].part_of_speech is None
        assert entries[0].pos_label == 'Unknown'

    def test_quoted_cells(self, processor):
        text = (
            'Words (Frequency),Lemma,Total,POS,Gloss\n'
            '"სახლი (12), სახლები (3)",სახლი,15,NOUN,house\n'
        )
        entries, detection, _ = processor.parse_reference_text(text)

        assert detection.schema == ReferenceSchema.FREQUENCY_ANNOTATED
        assert entries[0].get('Words (Frequency)') == 'სახლი (12), სახლები (3)'
        assert entries[0].get('Total') == '15'

    def test_trailing_delimiter_in_reference(self, processor):
        text = (
            'Word,Frequency,Lemma,POS,Gloss,Morphemes\n'
            'ორი,5,ორი,NUM,two,ორ-ი,\n'
        )
        entries, _, _ = processor.parse_reference_text(text)

        assert entries[0].get('Word') == 'ორი'
        assert entries[0].lemma == 'ორი'
        assert entries[0].morphemes == 'ორ-ი'

        resolver = MatchResolver(load_reference(text))
        assert [m.lemma for m in resolver.find_matches('ორი')] == ['ორი']

    def test_unknown_layout(self, processor):
        with pytest.raises(SchemaDetectionError) as exc_info:
            processor.parse_reference_text('Word,Lemma\nა,ა\n')

        assert str(exc_info.value).startswith('CSV must have one of these formats:')

    def test_empty_reference(self, processor):
        with pytest.raises(EmptyInputError) as exc_info:
            processor.parse_reference_text('  ')

        assert str(exc_info.value) == 'Reference data appears to be empty.'


# ===== Uploads =====

class TestDecodeUpload:

    def test_utf8(self, processor):
        assert processor.decode_upload('Word\nორი'.encode('utf-8')) == 'Word\nორი'

    def test_utf8_bom_stripped(self, processor):
        raw = b'\xef\xbb\xbf' + 'Word\nორი'.encode('utf-8')
        assert processor.decode_upload(raw) == 'Word\nორი'

    def test_legacy_encoding_still_decodes(self, processor):
        text = processor.decode_upload('Word\ncafé\nnaïve\n'.encode('cp1252'))
        assert text.startswith('Word\n')
