from __future__ import annotations

import datetime as _dt
import json
import logging
import os
from pathlib import Path
from typing import Any

from ara_common.context import get_request_id
from ara_common.errors import REDACT_TOKEN


logger = logging.getLogger(__name__)

_SECRET_KEYS = {"authorization", "password", "passwd", "token", "access_token", "api_key", "apikey"}


def telemetry_disabled() -> bool:
    return os.getenv("ARA_DISABLE_TELEMETRY", "0").strip().lower() in {"1", "true", "yes"}


def telemetry_file() -> Path | None:
    """JSONL sink, only when ARA_TELEMETRY_FILE is set."""
    p = os.getenv("ARA_TELEMETRY_FILE")
    if not p:
        return None
    return Path(p).expanduser().resolve()


def redact_secrets(obj: Any) -> Any:
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if isinstance(k, str) and k.strip().lower() in _SECRET_KEYS:
                if isinstance(v, str) and v.strip().lower().startswith("basic "):
                    out[k] = "Basic " + REDACT_TOKEN
                else:
                    out[k] = REDACT_TOKEN
            else:
                out[k] = redact_secrets(v)
        return out
    if isinstance(obj, list):
        return [redact_secrets(x) for x in obj]
    return obj


def log_event(
    kind: str,
    name: str,
    args: dict | None = None,
    ok: bool = True,
    ms: int = 0,
    *,
    corr_id: str | None = None,
) -> dict | None:
    """
    Emit one telemetry record for a tool/resource call.

    The record always goes to the module logger; it is also appended as JSONL
    when ARA_TELEMETRY_FILE is configured. Returns the (redacted) record.
    """
    if telemetry_disabled():
        return None

    rid = get_request_id()
    rec = {
        "ts": _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z"),
        "kind": kind,
        "name": name,
        "request_id": rid,
        "corr_id": corr_id or rid,
        "args": {} if args is None else dict(args),
        "ok": bool(ok),
        "ms": int(ms),
    }
    safe = redact_secrets(rec)
    line = json.dumps(safe, ensure_ascii=False, default=str)
    logger.info("%s", line)

    p = telemetry_file()
    if p is not None:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
    return safe
