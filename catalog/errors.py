"""
API error types and the handlers that render them as error envelopes.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.responses import error_res

logger = logging.getLogger("catalog.errors")


class APIError(Exception):
    """An error with a client-facing key and HTTP status."""

    def __init__(self, status_code: int, key: str):
        super().__init__(key)
        self.status_code = status_code
        self.key = key

    def __repr__(self):
        return f"<APIError({self.status_code}, '{self.key}')>"


class ERROR:
    """Factories for the error keys clients know about."""

    @staticmethod
    def request_body_invalid() -> APIError:
        return APIError(400, "requestBodyInvalid")

    @staticmethod
    def email_invalid() -> APIError:
        return APIError(400, "emailInvalid")

    @staticmethod
    def password_invalid() -> APIError:
        return APIError(400, "passwordInvalid")

    @staticmethod
    def email_domain_not_allowed() -> APIError:
        return APIError(403, "emailDomainNotAllowed")

    @staticmethod
    def email_taken() -> APIError:
        return APIError(409, "emailTaken")

    @staticmethod
    def modify_nonexistent() -> APIError:
        return APIError(404, "modifyNonexistent")

    @staticmethod
    def not_logged_in() -> APIError:
        return APIError(401, "notLoggedIn")

    @staticmethod
    def must_be_logged_out() -> APIError:
        return APIError(403, "mustBeLoggedOut")

    @staticmethod
    def insufficient_permissions() -> APIError:
        return APIError(403, "insufficientPermissions")

    @staticmethod
    def invalid_credentials() -> APIError:
        return APIError(401, "invalidCredentials")

    @staticmethod
    def verification_invalid() -> APIError:
        return APIError(404, "verificationInvalid")


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.key}")
    return JSONResponse(status_code=exc.status_code, content=error_res(exc.key))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Invalid body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content=error_res("requestBodyInvalid"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
