"""Problem-detail error responses and the Result → HTTP status mapping."""
from __future__ import annotations
import logging
from typing import Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from craftify.domain.common.result import ErrorKind, Result

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.PRECONDITION_FAILED: status.HTTP_412_PRECONDITION_FAILED,
}

TITLES: Dict[int, str] = {
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    409: "Conflict",
    412: "Precondition Failed",
}


class ProblemException(HTTPException):
    def __init__(self, status_code: int, detail: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(status_code=status_code, detail=detail)
        self.errors = errors or {}


def raise_for_result(result: Result) -> None:
    if result.is_success:
        return
    code = STATUS_BY_KIND.get(result.kind, status.HTTP_400_BAD_REQUEST)
    raise ProblemException(code, result.error or TITLES.get(code, "Error"), result.field_errors)


def _problem(request: Request, status_code: int, detail: str, errors: Dict[str, str], headers=None) -> JSONResponse:
    body = {
        "type": "about:blank",
        "title": TITLES.get(status_code, "Error"),
        "status": status_code,
        "detail": detail,
        "instance": request.url.path,
        "errors": errors,
    }
    return JSONResponse(status_code=status_code, content=body, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


# ------------------------------------------------------------------
# Exception handlers (registered in main)
# ------------------------------------------------------------------
async def problem_exception_handler(request: Request, exc: ProblemException) -> JSONResponse:
    return _problem(request, exc.status_code, str(exc.detail), exc.errors, getattr(exc, "headers", None))


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return _problem(request, exc.status_code, str(exc.detail), {}, getattr(exc, "headers", None))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: Dict[str, str] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        errors[".".join(loc) or "request"] = err.get("msg", "invalid value")
    logger.info("Rejected malformed request to %s: %s", request.url.path, errors)
    return _problem(request, status.HTTP_400_BAD_REQUEST, "Request validation failed.", errors)
