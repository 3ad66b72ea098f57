"""
Matching API Endpoints

Handles word-list parsing, batch processing and single-word lookups
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel
import logging

from ..core.errors import LemmaMatcherError, ReferenceNotLoadedError
from ..core.match_resolver import MatchResolver
from ..core.models import Match, MatchResult
from ..core.session import MatchingSession
from ..core.transliteration import contains_georgian, generate_variants, transliterate
from .deps import (
    check_batch_size,
    get_batch_processor,
    get_data_processor,
    get_matching_session,
    to_http_exception,
)
from .sessions import read_upload

logger = logging.getLogger(__name__)

router = APIRouter()

Frequency = Union[int, float, str]


# ===== Request/Response Models =====

class ParseWordListRequest(BaseModel):
    """Request model for parsing a pasted word list"""
    text: str
    batch_size: Optional[int] = None


class WordListInfo(BaseModel):
    """Response model for a parsed word list"""
    session_id: str
    total_words: int
    batch_size: int
    total_batches: int
    columns: List[str]
    preview: List[Dict[str, Any]]


class MatchModel(BaseModel):
    """One reference entry matched to a word"""
    lemma: str
    pos: Optional[str] = None
    gloss: Optional[str] = None
    morphemes: Optional[str] = None
    transliteration_variant: Optional[str] = None
    reference_row: int
    extra_fields: Dict[str, Any] = {}


class MatchResultModel(BaseModel):
    """Matches for one input word"""
    word: str
    frequency: Frequency
    original_index: int
    matches: List[MatchModel]


class BatchResponse(BaseModel):
    """Response model for one processed batch"""
    session_id: str
    batch_index: int
    start: int
    end: int
    matched: int
    unmatched: int
    has_more: bool
    processed: int
    total: int
    progress_percent: int
    processing_time: float
    results: List[MatchResultModel]


class LookupResponse(BaseModel):
    """Response model for a single-word lookup"""
    word: str
    contains_georgian: bool
    matches: List[MatchModel]


class TransliterationResponse(BaseModel):
    word: str
    transliteration: str
    variants: List[str]


# ===== Serialization =====

def match_to_model(match: Match) -> MatchModel:
    return MatchModel(
        lemma=match.lemma,
        pos=match.part_of_speech,
        gloss=match.gloss,
        morphemes=match.morphemes,
        transliteration_variant=match.transliteration_variant,
        reference_row=match.entry.position,
        extra_fields=match.entry.extra,
    )


def result_to_model(result: MatchResult) -> MatchResultModel:
    return MatchResultModel(
        word=result.word,
        frequency=result.frequency,
        original_index=result.original_index,
        matches=[match_to_model(m) for m in result.matches],
    )


def _word_list_info(session: MatchingSession) -> WordListInfo:
    preview = [record.to_dict() for record in session.records[:5]]
    columns = list(preview[0].keys()) if preview else []
    return WordListInfo(
        session_id=session.session_id,
        total_words=session.total,
        batch_size=session.batch_size,
        total_batches=session.total_batches,
        columns=columns,
        preview=preview,
    )


def _parse_word_list(session: MatchingSession, text: str, batch_size: Optional[int]) -> WordListInfo:
    if batch_size is not None:
        check_batch_size(batch_size)

    try:
        with session.lock:
            session.load_word_list(text, batch_size=batch_size, processor=get_data_processor())
    except LemmaMatcherError as e:
        logger.error(f"❌ Word list parse failed for session {session.session_id}: {e}")
        raise to_http_exception(e)

    return _word_list_info(session)


def _run_batch(session: MatchingSession, batch_index: Optional[int]) -> BatchResponse:
    processor = get_batch_processor()
    try:
        if batch_index is None:
            outcome = processor.process_next_batch(session)
        else:
            outcome = processor.process_batch(session, batch_index)
    except LemmaMatcherError as e:
        logger.error(f"❌ Batch failed for session {session.session_id}: {e}")
        raise to_http_exception(e)

    return BatchResponse(
        session_id=session.session_id,
        batch_index=outcome.batch_index,
        start=outcome.start,
        end=outcome.end,
        matched=outcome.matched,
        unmatched=outcome.unmatched,
        has_more=outcome.has_more,
        processed=session.processed_count,
        total=session.total,
        progress_percent=session.progress_percent,
        processing_time=outcome.processing_time,
        results=[result_to_model(r) for r in outcome.results],
    )


# ===== API Endpoints =====

@router.post("/sessions/{session_id}/words", response_model=WordListInfo)
def parse_word_list(
    request: ParseWordListRequest,
    session: MatchingSession = Depends(get_matching_session)
):
    """
    Parse a pasted word list (CSV/TSV with a Word column)

    Starts a fresh result set; previous results and statistics are dropped.
    """
    logger.info(f"📥 Parsing word list for session {session.session_id}")
    return _parse_word_list(session, request.text, request.batch_size)


@router.post("/sessions/{session_id}/words/upload", response_model=WordListInfo)
async def upload_word_list(
    file: UploadFile = File(...),
    batch_size: Optional[int] = Form(None),
    session: MatchingSession = Depends(get_matching_session)
):
    """Parse a word list from an uploaded CSV/TSV file"""
    logger.info(f"📤 Uploading word list {file.filename} for session {session.session_id}")
    text = await read_upload(file)
    return await run_in_threadpool(_parse_word_list, session, text, batch_size)


@router.delete("/sessions/{session_id}/words")
def reset_word_list(session: MatchingSession = Depends(get_matching_session)):
    """Discard the word list, results and statistics; reference data is kept"""
    with session.lock:
        session.reset_input()
    return {"session_id": session.session_id, "total_words": 0}


@router.post("/sessions/{session_id}/batches/next", response_model=BatchResponse)
def process_next_batch(session: MatchingSession = Depends(get_matching_session)):
    """Process the next unprocessed batch of the word list"""
    return _run_batch(session, None)


@router.post("/sessions/{session_id}/batches/{batch_index}", response_model=BatchResponse)
def process_batch(batch_index: int, session: MatchingSession = Depends(get_matching_session)):
    """Process a specific batch; it must be the next one in sequence"""
    return _run_batch(session, batch_index)


@router.get("/sessions/{session_id}/lookup", response_model=LookupResponse)
def lookup_word(
    word: str = Query(..., min_length=1),
    session: MatchingSession = Depends(get_matching_session)
):
    """Resolve a single word against the session's reference data"""
    if not session.reference_loaded:
        raise to_http_exception(ReferenceNotLoadedError())

    matches = MatchResolver(session.reference).find_matches(word)
    return LookupResponse(
        word=word,
        contains_georgian=contains_georgian(word),
        matches=[match_to_model(m) for m in matches],
    )


@router.get("/transliterate", response_model=TransliterationResponse)
async def transliterate_word(word: str = Query(..., min_length=1)):
    """Latin transcription and lookup variants of a Georgian word"""
    return TransliterationResponse(
        word=word,
        transliteration=transliterate(word),
        variants=generate_variants(word),
    )
