"""
Centralized Error Handling and Logging
Converts every failure into a short plaintext HTTP response and logs server-side
errors as structured JSON entries tied to a per-request trace ID.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)


class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    LOG_REQUEST_BODIES = True
    MAX_BODY_LOG_SIZE = 2000  # Truncate large bodies
    LOG_CLIENT_ERRORS = False  # 4xx responses are logged at INFO only

    BAD_REQUEST_MESSAGE = "bad request"
    INTERNAL_ERROR_MESSAGE = "internal server error"

    @classmethod
    def truncate(cls, body: Optional[str]) -> Optional[str]:
        if body is not None and len(body) > cls.MAX_BODY_LOG_SIZE:
            return body[:cls.MAX_BODY_LOG_SIZE] + "...[TRUNCATED]"
        return body


class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[BaseException] = None,
        extra_context: Optional[Dict[str, Any]] = None,
        include_traceback: bool = True
    ) -> str:
        """Log structured error with full context, returning its trace ID"""
        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": "ERROR"
        }

        if request:
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent", "unknown")
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
                "module": getattr(exception, '__module__', 'unknown')
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = "".join(
                    traceback.format_exception(type(exception), exception, exception.__traceback__)
                )

        if extra_context:
            log_entry["context"] = extra_context

        logger.error(json.dumps(log_entry, indent=2, default=str))
        return trace_id


def _captured_body(request: Request) -> Optional[str]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return ErrorHandlingConfig.truncate(body.decode('utf-8'))
    except UnicodeDecodeError:
        return "DECODE_ERROR"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a trace ID to every request and echoes it in the X-Trace-ID header"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        body = None
        if ErrorHandlingConfig.LOG_REQUEST_BODIES and request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
        request.state.captured_body = body

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    """Render HTTP errors (including router 404/405) as plaintext"""
    if exc.status_code >= 500:
        StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc.__cause__ or exc.__context__,
            extra_context={"request_body": _captured_body(request)},
        )
    elif ErrorHandlingConfig.LOG_CLIENT_ERRORS:
        StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            include_traceback=False
        )
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.detail}")

    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    """Malformed or mistyped request bodies are a plain 400"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
            "type": error.get("type", "unknown"),
        }
        for error in exc.errors()
    ]
    logger.info(f"Rejected request body on {request.method} {request.url.path}: {validation_details}")

    return PlainTextResponse(ErrorHandlingConfig.BAD_REQUEST_MESSAGE, status_code=400)


async def general_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Handle all other exceptions without exposing internal details"""
    # Runs outside RequestContextMiddleware, so the trace header is set here
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        extra_context={"request_body": _captured_body(request)},
    )

    return PlainTextResponse(
        ErrorHandlingConfig.INTERNAL_ERROR_MESSAGE, status_code=500, headers={"X-Trace-ID": trace_id}
    )


def setup_error_handling(app):
    """Install the request context middleware and global exception handlers"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling initialized")
