"""
Traduction des erreurs metier en reponses HTTP.

Table unique ErrorKind -> (code HTTP, libelle). Le domaine ne connait pas
HTTP : seule cette couche decide du code expose.

Corps d'erreur :
    {timestamp, status, error, code, message, path}
    + fieldErrors pour les erreurs de validation
    + retryable pour les conflits de concurrence

Toute exception non prevue devient une 500 au message generique, sans
detail interne.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError as FastAPIRequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.exceptions import ErrorKind, OrderServiceError

ERROR_RESPONSES: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.NOT_FOUND: (404, "Not Found"),
    ErrorKind.VALIDATION: (400, "Validation Failed"),
    ErrorKind.UNAVAILABLE: (422, "Product Unavailable"),
    ErrorKind.INVALID_OPERATION: (409, "Invalid Operation"),
    ErrorKind.CONCURRENCY_CONFLICT: (409, "Concurrency Conflict"),
    ErrorKind.UPSTREAM_FAILURE: (503, "Upstream Failure"),
}

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


def error_body(
    status: int,
    error: str,
    code: str,
    message: str,
    path: str,
    field_errors: Optional[dict[str, str]] = None,
    retryable: Optional[bool] = None,
) -> dict[str, Any]:
    """Construit le corps JSON d'une reponse d'erreur."""
    body: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": error,
        "code": code,
        "message": message,
        "path": path,
    }
    if field_errors is not None:
        body["fieldErrors"] = field_errors
    if retryable is not None:
        body["retryable"] = retryable
    return body


async def handle_order_service_error(request: Request, exc: OrderServiceError) -> JSONResponse:
    """Traduit une erreur metier via la table ERROR_RESPONSES."""
    status, error = ERROR_RESPONSES[exc.kind]
    field_errors = getattr(exc, "field_errors", None)
    retryable = True if exc.kind is ErrorKind.CONCURRENCY_CONFLICT else None
    if status >= 500:
        logger.error("Dependance en echec", path=request.url.path, message=exc.message)
    return JSONResponse(
        status_code=status,
        content=error_body(
            status,
            error,
            exc.kind.value,
            exc.message,
            request.url.path,
            field_errors=field_errors,
            retryable=retryable,
        ),
    )


def _field_path(loc: tuple) -> str:
    """("body", "items", 0, "quantity") -> "items[0].quantity"."""
    path = ""
    for part in loc:
        if part in ("body", "query", "path"):
            continue
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path or "request"


async def handle_request_validation_error(
    request: Request, exc: FastAPIRequestValidationError
) -> JSONResponse:
    """Traduit les erreurs de typage de la requete (JSON, query) au format commun."""
    field_errors = {_field_path(tuple(err["loc"])): err["msg"] for err in exc.errors()}
    status, error = ERROR_RESPONSES[ErrorKind.VALIDATION]
    return JSONResponse(
        status_code=status,
        content=error_body(
            status,
            error,
            ErrorKind.VALIDATION.value,
            "Input validation error",
            request.url.path,
            field_errors=field_errors,
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Reponse generique pour toute erreur imprevue."""
    logger.opt(exception=exc).error("Erreur inattendue", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body(
            500,
            "Internal Server Error",
            "UNEXPECTED_FAILURE",
            UNEXPECTED_ERROR_MESSAGE,
            request.url.path,
        ),
    )


def install_error_handlers(app: FastAPI) -> None:
    """Enregistre les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(OrderServiceError, handle_order_service_error)
    app.add_exception_handler(FastAPIRequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
