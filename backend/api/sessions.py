"""
Session and Reference Data API Endpoints

Handles matching session lifecycle and loading of the reference lemma
dictionary (pasted text or uploaded CSV/TSV file)
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel
import logging

from shared.config import REFERENCE_FORMATS, WORD_LIST_COLUMNS, get_settings
from ..core.errors import LemmaMatcherError
from ..core.session import MatchingSession
from .deps import (
    check_batch_size,
    get_data_processor,
    get_matching_session,
    get_session_manager,
    to_http_exception,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# ===== Request/Response Models =====

class CreateSessionRequest(BaseModel):
    """Request model for creating a session"""
    batch_size: Optional[int] = None


class SessionInfo(BaseModel):
    """Session state summary"""
    session_id: str
    created_at: str
    updated_at: str
    reference_loaded: bool
    reference_entries: int
    reference_schema: Optional[str] = None
    total_words: int
    batch_size: int
    completed_batches: int
    total_batches: int
    processed_count: int
    progress_percent: int


class LoadReferenceRequest(BaseModel):
    """Request model for loading pasted reference data"""
    text: str


class ReferenceInfo(BaseModel):
    """Response model for a loaded reference dictionary"""
    session_id: str
    file_type: str
    schema_name: str
    entry_count: int
    indexed_forms: int
    columns: Dict[str, str]
    also_matched: List[str]
    message: str


# ===== Helpers =====

def _load_reference(session: MatchingSession, text: str) -> ReferenceInfo:
    try:
        with session.lock:
            reference = session.load_reference(text, processor=get_data_processor())
    except LemmaMatcherError as e:
        logger.error(f"❌ Reference load failed for session {session.session_id}: {e}")
        raise to_http_exception(e)

    columns = dict(reference.detection.columns)
    columns['word'] = reference.detection.word_column

    return ReferenceInfo(
        session_id=session.session_id,
        file_type=reference.file_type,
        schema_name=reference.schema.value,
        entry_count=len(reference.entries),
        indexed_forms=len(reference.index),
        columns=columns,
        also_matched=[s.value for s in reference.detection.also_matched],
        message=f"✓ {reference.file_type} data loaded successfully with {len(reference.entries)} entries",
    )


async def read_upload(file: UploadFile) -> str:
    """Read an uploaded file and decode it to text off the event loop"""
    settings = get_settings()

    extension = Path(file.filename or '').suffix.lower()
    if extension and extension not in settings.supported_formats:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type {extension}; expected one of {settings.supported_formats}"
        )

    try:
        raw = await file.read()
    finally:
        await file.close()

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    if len(raw) > max_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds the {settings.max_upload_size_mb} MB upload limit"
        )

    try:
        return await run_in_threadpool(get_data_processor().decode_upload, raw)
    except LemmaMatcherError as e:
        raise to_http_exception(e)


# ===== API Endpoints =====

@router.get("/formats")
async def list_formats():
    """Accepted reference layouts and word-list columns"""
    return {
        'reference_formats': REFERENCE_FORMATS,
        'word_list_columns': WORD_LIST_COLUMNS,
        'allowed_batch_sizes': get_settings().allowed_batch_sizes,
    }


@router.post("", response_model=SessionInfo)
async def create_session(request: Optional[CreateSessionRequest] = None):
    """Create a new matching session"""
    batch_size = request.batch_size if request else None
    if batch_size is not None:
        check_batch_size(batch_size)

    session = get_session_manager().create_session(
        batch_size=batch_size or get_settings().default_batch_size
    )
    return SessionInfo(**session.summary())


@router.get("/{session_id}", response_model=SessionInfo)
async def get_session(session: MatchingSession = Depends(get_matching_session)):
    """Get session state"""
    return SessionInfo(**session.summary())


@router.delete("/{session_id}")
async def delete_session(session: MatchingSession = Depends(get_matching_session)):
    """Delete a session and everything it holds"""
    get_session_manager().delete_session(session.session_id)
    return {"session_id": session.session_id, "deleted": True}


@router.post("/{session_id}/reference", response_model=ReferenceInfo)
def load_reference(
    request: LoadReferenceRequest,
    session: MatchingSession = Depends(get_matching_session)
):
    """
    Load pasted reference lemma data (CSV or TSV)

    Supported layouts:
    - Word, Frequency, Lemma, POS, Gloss, Morphemes
    - Word forms, Lemma, POS, Gloss
    - Words (Frequency), Lemma
    """
    logger.info(f"📥 Loading reference data for session {session.session_id}")
    return _load_reference(session, request.text)


@router.post("/{session_id}/reference/upload", response_model=ReferenceInfo)
async def upload_reference(
    file: UploadFile = File(...),
    session: MatchingSession = Depends(get_matching_session)
):
    """Load reference lemma data from an uploaded CSV/TSV file"""
    logger.info(f"📤 Uploading reference file {file.filename} for session {session.session_id}")
    text = await read_upload(file)
    return await run_in_threadpool(_load_reference, session, text)


@router.delete("/{session_id}/reference")
def reset_reference(session: MatchingSession = Depends(get_matching_session)):
    """Discard loaded reference data; the word list and results are kept"""
    with session.lock:
        session.reset_reference()
    return {"session_id": session.session_id, "reference_loaded": False}
