"""
Request/response logging hooks.
Each request is logged on entry (method, path, redacted JSON body) and on exit
(status and elapsed time).
"""
import logging
import time

from flask import g, request

logger = logging.getLogger("api.http")

SENSITIVE_FIELDS = ("password", "token", "refreshToken", "accessToken")
REDACTED = "***REDACTED***"


def sanitize_body(body):
    """Copy of a JSON body with credential fields replaced by REDACTED."""
    if not isinstance(body, dict):
        return body
    sanitized = dict(body)
    for field in SENSITIVE_FIELDS:
        if sanitized.get(field):
            sanitized[field] = REDACTED
    return sanitized


def register_request_logging(app):
    @app.before_request
    def log_request():
        g.request_started_at = time.perf_counter()
        body = request.get_json(silent=True) if request.is_json else None
        logger.info(
            "REQUEST %s %s query=%s body=%s",
            request.method,
            request.path,
            request.args.to_dict(),
            sanitize_body(body),
        )

    @app.after_request
    def log_response(response):
        started = g.pop("request_started_at", None)
        elapsed_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        log = logger.warning if response.status_code >= 400 else logger.info
        log("RESPONSE %s %s %s %.1fms", request.method, request.path, response.status_code, elapsed_ms)
        return response
