from __future__ import annotations

import functools
import inspect
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from ara_common.context import get_request_id, new_request_id, set_request_id
from ara_common.errors import ERROR_TEXT_PREFIX, REDACT_TOKEN, error_from_exception, typed_error
from ara_common.telemetry import log_event


# ---------------------------------------------------------------------------
# Shared helpers for MCP tool handlers
# ---------------------------------------------------------------------------


_REDACTION_KEYS = {"password", "authorization", "token", "access_token", "api_key", "apikey"}


def sanitize_args_for_log(args: dict | None) -> dict:
    """Remove obvious secrets from args (telemetry layer also redacts)."""
    out: dict[str, Any] = {}
    for k, v in (args or {}).items():
        out[str(k)] = REDACT_TOKEN if str(k).lower() in _REDACTION_KEYS else v
    return out


def is_error_text(payload: Any) -> bool:
    """Tool handlers report remote failures as text starting with 'Error'."""
    return isinstance(payload, str) and payload.startswith(ERROR_TEXT_PREFIX)


@dataclass(frozen=True)
class InstrumentConfig:
    kind: str
    name: str

    # correlation id behavior
    new_corr_id_per_call: bool = True


def instrument_async_tool(cfg: InstrumentConfig):
    """Decorator for async tool and resource handlers.

    Times the call, emits one telemetry event and re-raises unexpected
    exceptions so protocol-level faults still reach the client.
    """

    def decorator(fn: Callable[..., Awaitable[Any]]):
        fn_sig = inspect.signature(fn)

        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any):
            corr_id = get_request_id()
            if cfg.new_corr_id_per_call or not corr_id:
                corr_id = new_request_id()
                set_request_id(corr_id)

            t0 = time.perf_counter()
            bound = fn_sig.bind_partial(*args, **kwargs)
            bound.apply_defaults()
            args_for_log: dict[str, Any] = {"args": sanitize_args_for_log(dict(bound.arguments))}

            try:
                payload = await fn(*args, **kwargs)
            except Exception as e:
                ms = int((time.perf_counter() - t0) * 1000)
                args_for_log["error"] = error_from_exception(e)["error"]
                log_event(cfg.kind, cfg.name, args_for_log, ok=False, ms=ms, corr_id=corr_id)
                raise

            ms = int((time.perf_counter() - t0) * 1000)
            ok = not is_error_text(payload)
            if not ok:
                args_for_log["error"] = typed_error("upstream_error", payload)["error"]

            log_event(cfg.kind, cfg.name, args_for_log, ok=ok, ms=ms, corr_id=corr_id)
            return payload

        # Preserve signature for schema generation
        wrapper.__signature__ = fn_sig  # type: ignore[attr-defined]
        return wrapper

    return decorator
