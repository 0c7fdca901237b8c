"""
Error taxonomy and the `{"error": message}` envelope.

Expected outcomes (401/403/404/400/413/429) are raised as ApiError subclasses
and rendered with their message. Anything else is caught at the handler
boundary by `guarded()`, logged, and reported as a generic message.
"""
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from prompthub.utils.logger import log_error, log_warning

MSG_VALIDATION = "잘못된 요청입니다"
MSG_UNAUTHENTICATED = "로그인이 필요합니다"
MSG_FORBIDDEN = "접근 권한이 없습니다"
MSG_NOT_FOUND = "요청한 리소스를 찾을 수 없습니다"
MSG_PAYLOAD_TOO_LARGE = "요청 크기가 너무 큽니다"
MSG_QUOTA_EXCEEDED = "프롬프트 복사 한도를 초과했습니다"
MSG_UNEXPECTED = "서버 오류가 발생했습니다"


class ApiError(Exception):
    status_code = 500
    default_message = MSG_UNEXPECTED

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(ApiError):
    status_code = 400
    default_message = MSG_VALIDATION


class Unauthenticated(ApiError):
    status_code = 401
    default_message = MSG_UNAUTHENTICATED


class Forbidden(ApiError):
    status_code = 403
    default_message = MSG_FORBIDDEN


class NotFound(ApiError):
    status_code = 404
    default_message = MSG_NOT_FOUND


class PayloadTooLarge(ApiError):
    status_code = 413
    default_message = MSG_PAYLOAD_TOO_LARGE


class QuotaExceeded(ApiError):
    status_code = 429
    default_message = MSG_QUOTA_EXCEEDED


class Unexpected(ApiError):
    status_code = 500
    default_message = MSG_UNEXPECTED


def error_response(error: ApiError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@contextmanager
def guarded(context: str, message: str = MSG_UNEXPECTED, error_cls=Unexpected) -> Iterator[None]:
    """
    Handler boundary.

    ApiError passes through untouched. Any other exception is logged under
    `context` and re-raised as `error_cls(message)` so the client only sees
    the localized message.
    """
    try:
        yield
    except ApiError:
        raise
    except Exception as e:
        log_error(context, e)
        raise error_cls(message) from e


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError):
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        log_warning("request.validation", f"{request.method} {request.url.path}", {"errors": len(exc.errors())})
        return error_response(ValidationFailed())
