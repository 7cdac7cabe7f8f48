from fastapi import Request, status
from fastapi.responses import JSONResponse
import logging

from freshtrack.utils.exceptions import (
    FreshTrackError,
    ProductValidationError,
    StorageError,
)

logger = logging.getLogger(__name__)


async def freshtrack_exception_handler(request: Request, exc: FreshTrackError):
    """Gestionnaire des erreurs du moteur : chaque échec reste local à la requête"""

    if isinstance(exc, ProductValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.message},
        )

    if isinstance(exc, StorageError):
        logger.error(f"Storage Error: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "A storage operation failed."},
        )

    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred on the server."},
    )
