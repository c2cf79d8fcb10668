"""Error envelope recorded in telemetry events, plus the shared redaction token."""

REDACT_TOKEN = "***redacted***"

# Tool bodies report remote failures as text with this prefix.
ERROR_TEXT_PREFIX = "Error"


def typed_error(code: str, message: str) -> dict:
    """{"error": {"code": ..., "message": ...}} for a failed tool/resource call."""
    return {"error": {"code": code, "message": message}}


def error_from_exception(exc: BaseException) -> dict:
    return typed_error(type(exc).__name__, str(exc))
