"""
Tests for incremental batch matching
"""

import pytest

from backend.core.batch_processor import BatchProcessor
from backend.core.errors import BatchOrderError, EmptyInputError, ReferenceNotLoadedError
from backend.core.match_resolver import MatchResolver
from backend.core.session import MatchingSession
from tests.conftest import morpheme_reference_text, word_list_text

REFERENCE_ROWS = [
    ('ა', '1', 'ა', 'NOUN', 'a', 'ა'),
    ('ბ', '1', 'ბ', 'VERB', 'b', 'ბ'),
    ('გ', '1', 'გ', 'NOUN', 'g', 'გ'),
]

WORDS = ['ა', 'ბ', 'x', 'გ', 'ა', 'y', 'ბ']


def make_session(batch_size=3, words=WORDS, rows=REFERENCE_ROWS):
    session = MatchingSession(batch_size=batch_size)
    if rows is not None:
        session.load_reference(morpheme_reference_text(rows))
    if words is not None:
        session.load_word_list(word_list_text(words))
    return session


@pytest.fixture
def batch_processor():
    return BatchProcessor()


class TestProcessBatch:

    def test_first_batch(self, batch_processor):
        session = make_session()
        outcome = batch_processor.process_batch(session, 1)

        assert (outcome.start, outcome.end) == (0, 3)
        assert outcome.size == 3
        assert [r.original_index for r in outcome.results] == [0, 1, 2]
        assert (outcome.matched, outcome.unmatched) == (2, 1)
        assert outcome.has_more
        assert session.completed_batches == 1
        assert session.processed_count == 3

    def test_last_batch_is_short(self, batch_processor):
        session = make_session()
        batch_processor.process_batch(session, 1)
        batch_processor.process_batch(session, 2)
        outcome = batch_processor.process_batch(session, 3)

        assert (outcome.start, outcome.end) == (6, 7)
        assert not outcome.has_more
        assert session.progress_percent == 100

    def test_out_of_order_rejected(self, batch_processor):
        session = make_session()
        batch_processor.process_batch(session, 1)

        with pytest.raises(BatchOrderError) as exc_info:
            batch_processor.process_batch(session, 3)

        assert exc_info.value.expected == 2
        assert len(session.results) == 3
        assert session.completed_batches == 1

    def test_repeating_a_batch_rejected(self, batch_processor):
        session = make_session()
        batch_processor.process_batch(session, 1)

        with pytest.raises(BatchOrderError):
            batch_processor.process_batch(session, 1)

    def test_past_the_end_rejected(self, batch_processor):
        session = make_session()
        batch_processor.process_all(session)

        with pytest.raises(BatchOrderError):
            batch_processor.process_next_batch(session)

    def test_requires_reference(self, batch_processor):
        session = make_session(rows=None)
        assert session.total == len(WORDS)

        with pytest.raises(ReferenceNotLoadedError):
            batch_processor.process_next_batch(session)

    def test_requires_word_list(self, batch_processor):
        session = make_session(words=None)

        with pytest.raises(EmptyInputError):
            batch_processor.process_next_batch(session)

    def test_failed_batch_commits_nothing(self, batch_processor, monkeypatch):
        session = make_session()
        batch_processor.process_batch(session, 1)
        before = session.statistics.to_dict()

        original = MatchResolver.find_matches

        def failing(self, word):
            if word == 'y':
                raise RuntimeError('lookup failed')
            return original(self, word)

        monkeypatch.setattr(MatchResolver, 'find_matches', failing)

        with pytest.raises(RuntimeError):
            batch_processor.process_batch(session, 2)

        assert len(session.results) == 3
        assert session.completed_batches == 1
        assert session.statistics.to_dict() == before


class TestWholeList:

    @pytest.mark.parametrize('batch_size', [1, 2, 3, 7, 500])
    def test_output_order_independent_of_batch_size(self, batch_processor, batch_size):
        session = make_session(batch_size=batch_size)
        results = batch_processor.process_all(session)

        assert [r.original_index for r in results] == list(range(len(WORDS)))
        assert [r.word for r in results] == WORDS

    def test_statistics(self, batch_processor):
        session = make_session()
        batch_processor.process_all(session)
        stats = session.statistics

        assert stats.total == 7
        assert (stats.matched, stats.unmatched) == (5, 2)
        assert stats.by_part_of_speech == {'NOUN': 3, 'VERB': 2}

    def test_statistics_only_grow(self, batch_processor):
        session = make_session(batch_size=2)
        matched, unmatched = 0, 0

        for outcome in batch_processor.iter_batches(session):
            stats = session.statistics
            assert stats.matched >= matched
            assert stats.unmatched >= unmatched
            assert stats.processed == outcome.end
            matched, unmatched = stats.matched, stats.unmatched

    def test_every_match_counts_toward_pos(self, batch_processor):
        session = make_session(
            words=['ა'],
            rows=[
                ('ა', '1', 'ა1', 'NOUN', 'a', 'ა'),
                ('ა', '1', 'ა2', 'NOUN', 'a', 'ა'),
            ],
        )
        batch_processor.process_all(session)

        assert session.statistics.matched == 1
        assert session.statistics.by_part_of_speech == {'NOUN': 2}

    def test_iter_batches_yields_each_batch(self, batch_processor):
        session = make_session()
        indexes = [outcome.batch_index for outcome in batch_processor.iter_batches(session)]
        assert indexes == [1, 2, 3]

    def test_iter_batches_can_stop_early(self, batch_processor):
        session = make_session()
        batches = batch_processor.iter_batches(session)
        next(batches)

        assert session.completed_batches == 1
        assert batch_processor.has_more_batches(session)


class TestBatchSize:

    def test_processor_override(self):
        session = make_session(batch_size=500)
        outcome = BatchProcessor(batch_size=2).process_next_batch(session)

        assert session.batch_size == 2
        assert (outcome.start, outcome.end) == (0, 2)

    def test_override_not_applied_when_batch_is_rejected(self):
        session = make_session(batch_size=500, rows=None)

        with pytest.raises(ReferenceNotLoadedError):
            BatchProcessor(batch_size=2).process_next_batch(session)

        assert session.batch_size == 500

    def test_batch_range(self, batch_processor):
        session = make_session()
        assert batch_processor.batch_range(session, 3) == (6, 7)

    def test_cannot_change_after_processing(self, batch_processor):
        session = make_session()
        batch_processor.process_next_batch(session)

        with pytest.raises(ValueError):
            session.set_batch_size(2)

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchProcessor(batch_size=0)

    def test_progress(self, batch_processor):
        session = make_session()
        batch_processor.process_next_batch(session)

        assert batch_processor.progress(session) == {
            'completed_batches': 1,
            'total_batches': 3,
            'processed': 3,
            'total': 7,
            'progress_percent': 43,
            'has_more': True,
            'next_batch_size': 3,
        }


class TestReset:

    def test_new_word_list_starts_fresh(self, batch_processor):
        session = make_session()
        batch_processor.process_all(session)

        session.load_word_list(word_list_text(['გ']))

        assert session.results == []
        assert session.completed_batches == 0
        assert session.statistics.processed == 0
        assert session.reference_loaded

    def test_reset_input_keeps_reference(self, batch_processor):
        session = make_session()
        batch_processor.process_next_batch(session)
        session.reset_input()

        assert session.total == 0
        assert session.results == []
        assert session.reference_loaded

    def test_failed_parse_keeps_previous_list(self):
        session = make_session()

        with pytest.raises(EmptyInputError):
            session.load_word_list('  ')

        assert session.total == len(WORDS)
