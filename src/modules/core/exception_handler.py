"""Project exception handler for DRF.

Builds on ``drf-standardized-errors`` so every DRF error uses the
``{"type": ..., "errors": [...]}`` format, and maps persistence failures
(``StorageError``) to ``503 Service Unavailable``.
"""

from __future__ import annotations

import structlog
from drf_standardized_errors.handler import ExceptionHandler
from rest_framework import exceptions

from modules.core.exceptions import StorageError

logger = structlog.get_logger(__name__)


class StorageUnavailable(exceptions.APIException):
    status_code = 503
    default_detail = "Storage is temporarily unavailable. Please retry."
    default_code = "storage_unavailable"


class StorageAwareExceptionHandler(ExceptionHandler):
    def convert_known_exceptions(self, exc: Exception) -> Exception:
        if isinstance(exc, StorageError):
            logger.error("api.storage_error", error=str(exc))
            return StorageUnavailable()
        return super().convert_known_exceptions(exc)
