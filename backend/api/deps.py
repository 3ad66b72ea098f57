"""
Shared dependencies for API routes
"""

from fastapi import HTTPException

from shared.config import get_settings
from ..core.batch_processor import BatchProcessor
from ..core.data_processor import DataProcessor
from ..core.errors import BatchOrderError, LemmaMatcherError, SchemaDetectionError
from ..core.session import MatchingSession, validate_batch_size
from ..tasks.session_manager import SessionManager, SessionNotFoundError, session_manager

data_processor = DataProcessor()
batch_processor = BatchProcessor()


def get_session_manager() -> SessionManager:
    return session_manager


def get_data_processor() -> DataProcessor:
    return data_processor


def get_batch_processor() -> BatchProcessor:
    return batch_processor


def get_matching_session(session_id: str) -> MatchingSession:
    """Resolve the session path parameter, 404 if unknown"""
    try:
        return get_session_manager().get_session(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


def check_batch_size(batch_size: int) -> int:
    """400 unless batch_size is a positive integer from the allowed list"""
    try:
        validate_batch_size(batch_size)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    allowed = get_settings().allowed_batch_sizes
    if allowed and batch_size not in allowed:
        raise HTTPException(
            status_code=400,
            detail=f"Batch size must be one of {allowed}, got {batch_size}"
        )
    return batch_size


def to_http_exception(error: LemmaMatcherError) -> HTTPException:
    """Translate an engine error into an HTTP error response"""
    if isinstance(error, SchemaDetectionError):
        return HTTPException(
            status_code=400,
            detail={
                'message': error.message,
                'headers': error.headers,
                'expected_headers': error.expected_headers,
            }
        )
    if isinstance(error, BatchOrderError):
        return HTTPException(status_code=409, detail=error.message)
    return HTTPException(status_code=400, detail=error.message)
