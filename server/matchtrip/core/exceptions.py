"""Custom exceptions following RFC 9457 Problem Details for HTTP APIs."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ProblemDetailsException(HTTPException):
    """
    Base exception class following RFC 9457 Problem Details for HTTP APIs.

    https://tools.ietf.org/rfc/rfc9457.txt
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Problem Details exception.

        Args:
            status_code: HTTP status code
            title: Short, human-readable summary of the problem type
            detail: Human-readable explanation specific to this occurrence
            type_uri: URI reference that identifies the problem type
            instance: URI reference that identifies the specific occurrence
            extensions: Additional problem-specific information
            headers: HTTP headers to include in response
        """
        self.status_code = status_code
        self.title = title
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.instance = instance
        self.extensions = extensions or {}

        # Create the problem details object
        self.problem_details = {
            "type": self.type_uri,
            "title": self.title,
            "status": self.status_code,
        }

        if detail:
            self.problem_details["detail"] = detail

        if self.instance:
            self.problem_details["instance"] = self.instance

        # Add extensions
        self.problem_details.update(self.extensions)

        super().__init__(
            status_code=status_code,
            detail=self.problem_details,
            headers=headers
        )

    def __str__(self) -> str:
        return self.problem_details.get("detail", self.title)


class ValidationError(ProblemDetailsException):
    """
    Schema violation on a value read from or about to be written to a collection.

    Each violation carries the dotted path of the offending field.
    """

    def __init__(
        self,
        detail: str = "The data failed schema validation",
        violations: Optional[List[Dict[str, str]]] = None,
        instance: Optional[str] = None,
    ):
        self.violations = violations or []
        extensions: Dict[str, Any] = {"code": "VALIDATION_FAILED", "retryable": False}
        if self.violations:
            extensions["violations"] = self.violations

        super().__init__(
            status_code=400,
            title="Validation Error",
            detail=detail,
            type_uri="https://example.com/problems/validation-error",
            instance=instance,
            extensions=extensions,
        )

    @property
    def field_paths(self) -> List[str]:
        return [violation["path"] for violation in self.violations]


class AuthenticationError(ProblemDetailsException):
    """Exception for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication credentials are required",
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=401,
            title="Authentication Required",
            detail=detail,
            type_uri="https://example.com/problems/authentication-required",
            instance=instance,
            headers={"WWW-Authenticate": "Bearer"},
        )


class NotFoundError(ProblemDetailsException):
    """Exception for a missing collection file or entity id."""

    def __init__(
        self,
        resource_type: str = "resource",
        resource_id: Optional[str] = None,
        detail: Optional[str] = None,
        instance: Optional[str] = None,
    ):
        if not detail:
            detail = f"The requested {resource_type}"
            if resource_id:
                detail += f" with ID '{resource_id}'"
            detail += " could not be found"

        self.resource_type = resource_type
        self.resource_id = resource_id

        extensions = {
            "resource_type": resource_type,
        }
        if resource_id:
            extensions["resource_id"] = resource_id

        super().__init__(
            status_code=404,
            title="Resource Not Found",
            detail=detail,
            type_uri="https://example.com/problems/resource-not-found",
            instance=instance,
            extensions=extensions,
        )


class ConflictError(ProblemDetailsException):
    """Exception for resource conflict errors."""

    def __init__(
        self,
        detail: str = "The request conflicts with the current state of the resource",
        conflicting_resource: Optional[Dict[str, Any]] = None,
        instance: Optional[str] = None,
    ):
        extensions = {}
        if conflicting_resource:
            extensions["conflicting_resource"] = conflicting_resource

        super().__init__(
            status_code=409,
            title="Resource Conflict",
            detail=detail,
            type_uri="https://example.com/problems/resource-conflict",
            instance=instance,
            extensions=extensions,
        )


class InternalServerError(ProblemDetailsException):
    """Exception for internal server errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred while processing the request",
        error_id: Optional[str] = None,
        instance: Optional[str] = None,
    ):
        if not error_id:
            error_id = str(uuid.uuid4())

        extensions = {
            "error_id": error_id,
            "timestamp": _utc_timestamp(),
        }

        super().__init__(
            status_code=500,
            title="Internal Server Error",
            detail=detail,
            type_uri="https://example.com/problems/internal-server-error",
            instance=instance,
            extensions=extensions,
        )


# Storage exceptions

class StoreError(ProblemDetailsException):
    """
    Unexpected I/O failure inside the document store.

    The originating exception is kept on ``cause`` (and chained with
    ``raise ... from``) for diagnostics; it is never echoed to clients.
    """

    def __init__(
        self,
        collection: str,
        detail: str,
        cause: Optional[BaseException] = None,
    ):
        self.collection = collection
        self.cause = cause

        super().__init__(
            status_code=500,
            title="Storage Failure",
            detail=detail,
            type_uri="https://example.com/problems/storage-failure",
            extensions={
                "code": "STORE_ERROR",
                "retryable": False,
                "collection": collection,
            },
        )


class LockTimeoutError(ProblemDetailsException):
    """Exception when a collection lock could not be acquired in time."""

    def __init__(self, collection: str, attempts: int, waited_seconds: float):
        self.collection = collection
        self.attempts = attempts

        super().__init__(
            status_code=503,
            title="Collection Busy",
            detail=(
                f"Timed out acquiring lock for collection '{collection}' "
                f"after {attempts} attempts ({waited_seconds:.2f}s)"
            ),
            type_uri="https://example.com/problems/lock-timeout",
            extensions={
                "code": "LOCK_TIMEOUT",
                "retryable": True,
                "collection": collection,
                "attempts": attempts,
            },
            headers={"Retry-After": "1"},
        )


# Pricing exceptions

class PricingDataMissingError(ProblemDetailsException):
    """Exception when no base price exists for a sport/package/duration."""

    def __init__(self, sport: str, package: str, duration: str):
        super().__init__(
            status_code=500,
            title="Pricing Data Missing",
            detail=f"No base price configured for sport '{sport}', package '{package}', duration '{duration}'",
            type_uri="https://example.com/problems/pricing-data-missing",
            extensions={
                "code": "PRICING_DATA_MISSING",
                "retryable": False,
                "sport": sport,
                "package": package,
                "duration": duration,
            },
        )


class PriceMismatchError(ConflictError):
    """Exception when a client-submitted total disagrees with the server quote."""

    def __init__(self, server_price: float, client_price: float, tolerance: float):
        super().__init__(
            detail=(
                f"Submitted total {client_price} differs from the calculated total "
                f"{server_price} by more than {tolerance}"
            ),
        )
        self.problem_details.update({
            "code": "PRICE_MISMATCH",
            "retryable": False,
            "server_price": server_price,
            "client_price": client_price,
        })


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """
    Exception handler for Problem Details exceptions.

    Args:
        request: FastAPI request object
        exc: Problem Details exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.problem_details,
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI request validation failures as a 422 problem with violations."""
    violations = [
        {
            "path": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]

    return JSONResponse(
        status_code=422,
        content={
            "type": "https://example.com/problems/request-validation-error",
            "title": "Request Validation Error",
            "status": 422,
            "detail": "The request body failed validation",
            "instance": str(request.url),
            "violations": violations,
        },
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic exception handler that converts unhandled exceptions to Problem Details format.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )

    problem_details = {
        "type": "https://example.com/problems/internal-server-error",
        "title": "Internal Server Error",
        "status": 500,
        "detail": "An unexpected error occurred while processing the request",
        "instance": str(request.url),
        "error_id": error_id,
        "timestamp": _utc_timestamp(),
    }

    return JSONResponse(
        status_code=500,
        content=problem_details,
    )
