"""Mapping of store exceptions onto HTTP errors."""

import logging

from fastapi import HTTPException, status

from ..exceptions import NotFound, PersistenceFailure, StoreNotReady, TaskStoreError, ValidationFailure

logger = logging.getLogger(__name__)


def store_error_to_http(error: TaskStoreError) -> HTTPException:
    """Translate a store exception into the matching HTTPException.

    Args:
        error: Exception raised by the task store

    Returns:
        HTTPException with a 400, 404, 502 or 503 status
    """
    if isinstance(error, ValidationFailure):
        logger.warning(f"Validation error: {error}")
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, StoreNotReady):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error))
    if isinstance(error, PersistenceFailure):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(error))
    logger.error(f"Unexpected store error: {error}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error"
    )
