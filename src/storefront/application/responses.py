"""Response envelope shared by every outer surface.

Success:  ``{"success": true, "data": ...}``
Failure:  ``{"success": false, "error": <short title>, "message": <detail>}``
plus ``field`` (and ``fields`` / ``available`` where they apply).  Outside
production the failure also carries ``detail`` with the exception type
and traceback.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from storefront.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    MissingFieldsError,
    PersistenceError,
    ProductNotFoundError,
)

logger = structlog.get_logger(__name__)

# First match wins, so subclasses come before their bases.
_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (PersistenceError, 500),
    (ProductNotFoundError, 400),
    (EntityNotFoundError, 404),
    (DomainException, 400),
)


@dataclass(frozen=True)
class Response:
    status_code: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status_code < 400


def status_code_for(exc: Exception) -> int:
    for exc_type, status_code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def success(data: Any, status_code: int = 200) -> Response:
    return Response(status_code, {"success": True, "data": data})


def failure(exc: Exception, failure_title: str, expose_detail: bool = False) -> Response:
    status_code = status_code_for(exc)

    if isinstance(exc, DomainException) and status_code < 500:
        body: dict[str, Any] = {"success": False, "error": exc.error, "message": str(exc)}
    else:
        body = {
            "success": False,
            "error": failure_title,
            "message": str(exc) or "Unknown error",
        }

    field = getattr(exc, "field", None)
    if field:
        body["field"] = field
    if isinstance(exc, MissingFieldsError):
        body["fields"] = exc.fields
    if isinstance(exc, InsufficientStockError):
        body["available"] = exc.available

    if expose_detail:
        body["detail"] = {
            "type": type(exc).__name__,
            "trace": traceback.format_exception(type(exc), exc, exc.__traceback__),
        }
    return Response(status_code, body)


def respond(
    action: Callable[[], Any],
    failure_title: str,
    success_status: int = 200,
    expose_detail: bool = False,
) -> Response:
    """Run ``action`` and wrap its result, or its failure, in the envelope."""
    try:
        data = action()
    except DomainException as exc:
        response = failure(exc, failure_title, expose_detail)
        if response.status_code >= 500:
            logger.error(failure_title, error=str(exc), exc_info=exc)
        else:
            logger.info("request_rejected", error=exc.error, message=str(exc))
        return response
    except Exception as exc:
        logger.error(failure_title, error=str(exc), exc_info=exc)
        return failure(exc, failure_title, expose_detail)
    return success(data, success_status)
