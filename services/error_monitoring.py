"""
Error Monitoring and Logging
Centralized error logging with context, shared by the API and the ad widgets
"""
import logging
from typing import Optional
from fastapi import Request

logger = logging.getLogger(__name__)

SENSITIVE_HEADERS = ("authorization", "cookie", "x-api-key")


def _format_context(context: Optional[dict]) -> str:
    if not context:
        return ""
    return " | Context: " + ", ".join(f"{k}={v}" for k, v in context.items())


def capture_exception(error: BaseException, context: Optional[dict] = None):
    """Log an exception with its traceback and optional context"""
    logger.error(f"Unhandled exception: {error}{_format_context(context)}", exc_info=error)


def log_error_with_context(error: Exception, request: Optional[Request] = None, user_id: Optional[str] = None):
    """Log error with request context (sensitive headers stripped)"""
    context = {}

    if request:
        context["method"] = request.method
        context["path"] = request.url.path
        context["client"] = request.client.host if request.client else None
        headers = {k: v for k, v in request.headers.items() if k.lower() not in SENSITIVE_HEADERS}
        context["headers"] = headers

    if user_id:
        context["user_id"] = user_id

    capture_exception(error, context)
