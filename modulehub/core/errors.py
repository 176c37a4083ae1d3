"""Application error taxonomy and its JSON rendering."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException


class AppError(Exception):
    """Base class for errors that map onto an HTTP status and a public message."""

    status_code = 500
    message = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message is not None:
            self.message = message


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class DuplicateEmail(AppError):
    status_code = 409
    message = "Email is already registered"


class AuthenticationFailed(AppError):
    """Credential mismatch. Also raised for unknown emails."""

    status_code = 401
    message = "Invalid email or password"


class AuthenticationRequired(AppError):
    status_code = 401
    message = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidSessionToken(AppError):
    status_code = 401
    message = "Invalid token"
    headers = {"WWW-Authenticate": "Bearer"}


class TokenExpired(InvalidSessionToken):
    message = "Token has expired"


class InvalidSignature(InvalidSessionToken):
    message = "Invalid token signature"


class MalformedToken(InvalidSessionToken):
    message = "Malformed token"


class AccountNotActivated(AppError):
    status_code = 403
    message = "Account is not activated"


class AuthorizationFailed(AppError):
    status_code = 403
    message = "Insufficient role for this resource"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class InvalidActivationToken(NotFound):
    message = "Unknown activation token"


class InternalError(AppError):
    status_code = 500
    message = "Internal server error"


def error_response(status_code: int, message, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def handle_app_error(_request: Request, exc: AppError) -> JSONResponse:
    return error_response(exc.status_code, exc.message, exc.headers)


async def handle_http_exception(_request: Request, exc: HTTPException) -> JSONResponse:
    return error_response(exc.status_code, exc.detail, getattr(exc, "headers", None))


async def handle_request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors:
        return error_response(400, ValidationError.message)

    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", ValidationError.message)
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    if location:
        message = f"{location}: {message}"
    return error_response(400, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
