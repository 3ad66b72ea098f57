"""
Results API Endpoints

Handles results retrieval, match statistics and export
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from typing import Dict, List, Optional
import logging

from shared.config import get_settings
from ..core.exporter import ExportFormat, export_results
from ..core.session import MatchingSession
from .deps import get_batch_processor, get_matching_session
from .matching import MatchResultModel, result_to_model

logger = logging.getLogger(__name__)

router = APIRouter()

MEDIA_TYPES = {
    ExportFormat.TSV: "text/tab-separated-values; charset=utf-8",
    ExportFormat.CSV: "text/csv; charset=utf-8",
    ExportFormat.JSON: "application/json",
}


# ===== Request/Response Models =====

class ResultsPage(BaseModel):
    """Accumulated results, paged"""
    session_id: str
    total_results: int
    offset: int
    limit: int
    results: List[MatchResultModel]


class POSCount(BaseModel):
    pos: str
    count: int
    percentage: int


class StatisticsResponse(BaseModel):
    """Summary statistics for processed words"""
    session_id: str
    total: int
    processed: int
    matched: int
    unmatched: int
    matched_percent: int
    unmatched_percent: int
    by_part_of_speech: Dict[str, int]
    pos_distribution: List[POSCount]
    completed_batches: int
    total_batches: int
    has_more: bool
    next_batch_size: int


# ===== API Endpoints =====

@router.get("/sessions/{session_id}/results", response_model=ResultsPage)
async def get_results(
    offset: int = Query(0, ge=0),
    limit: Optional[int] = Query(None, ge=1),
    include_unmatched: bool = True,
    session: MatchingSession = Depends(get_matching_session)
):
    """
    Get accumulated match results in input order

    Unmatched words are included unless include_unmatched is false.
    """
    limit = limit or get_settings().results_page_size
    results = session.results
    if not include_unmatched:
        results = [r for r in results if r.is_matched]

    page = results[offset:offset + limit]
    return ResultsPage(
        session_id=session.session_id,
        total_results=len(results),
        offset=offset,
        limit=limit,
        results=[result_to_model(r) for r in page],
    )


@router.get("/sessions/{session_id}/statistics", response_model=StatisticsResponse)
async def get_statistics(session: MatchingSession = Depends(get_matching_session)):
    """
    Get match statistics and part-of-speech distribution

    The distribution holds the most frequent parts of speech, sorted by count.
    """
    logger.info(f"📊 Getting statistics for session: {session.session_id}")

    stats = session.statistics
    progress = get_batch_processor().progress(session)
    distribution = stats.pos_distribution(limit=get_settings().pos_chart_limit)

    return StatisticsResponse(
        session_id=session.session_id,
        total=stats.total,
        processed=stats.processed,
        matched=stats.matched,
        unmatched=stats.unmatched,
        matched_percent=stats.matched_percent,
        unmatched_percent=stats.unmatched_percent,
        by_part_of_speech=dict(stats.by_part_of_speech),
        pos_distribution=[POSCount(**item) for item in distribution],
        completed_batches=progress['completed_batches'],
        total_batches=progress['total_batches'],
        has_more=progress['has_more'],
        next_batch_size=progress['next_batch_size'],
    )


@router.get("/sessions/{session_id}/export", response_class=PlainTextResponse)
async def export_session_results(
    format: ExportFormat = ExportFormat.TSV,
    include_unmatched: bool = False,
    session: MatchingSession = Depends(get_matching_session)
):
    """
    Export accumulated results

    Formats:
    - TSV: Word, Frequency, Lemma, POS, Gloss, Morphemes, Morpheme_Count
    - CSV: Same columns, comma-separated
    - JSON: List of row objects
    """
    logger.info(f"📤 Exporting results for session: {session.session_id} as {format.value}")

    content = export_results(session.results, format, include_unmatched=include_unmatched)
    return PlainTextResponse(content=content, media_type=MEDIA_TYPES[format])
