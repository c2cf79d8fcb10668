from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv


DEFAULT_API_SERVER = "http://localhost:8000"
DEFAULT_USER_AGENT = "ara-records-mcp/1.0"


def _find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward until we find pyproject.toml or .git.
    """
    start = start.resolve()
    for p in (start, *start.parents):
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return None


@lru_cache(maxsize=1)
def repo_root() -> Path:
    """Best-effort repository root discovery.

    Order of precedence:
      1) ARA_REPO_ROOT (explicit override)
      2) walk upward from current working directory
      3) walk upward from this module file's directory
    """
    explicit = os.getenv("ARA_REPO_ROOT")
    if explicit:
        p = Path(explicit).expanduser().resolve()
        if not p.is_dir():
            raise RuntimeError(f"ARA_REPO_ROOT does not exist or is not a directory: {p}")
        return p

    cwd = Path.cwd().resolve()
    root = _find_repo_root(cwd)
    if root:
        return root

    here_dir = Path(__file__).resolve().parent
    root = _find_repo_root(here_dir)
    if root:
        return root

    return cwd


@lru_cache(maxsize=1)
def load_env_once() -> Optional[Path]:
    """
    Load dotenv exactly once. Precedence:
      1) ARA_ENV_FILE (explicit path)
      2) repo-root/.env
    """
    explicit = os.getenv("ARA_ENV_FILE")
    candidates = []

    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(repo_root() / ".env")

    for p in candidates:
        try:
            p = p.resolve()
        except OSError:
            continue
        if p.exists() and p.is_file():
            # Do NOT override already-set environment variables
            load_dotenv(dotenv_path=str(p), override=False)
            return p

    return None


def _env_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


@dataclass(frozen=True)
class AraSettings:
    """Resolved connection settings for the ARA API."""

    api_server: str = DEFAULT_API_SERVER
    username: str | None = None
    password: str | None = None
    http_timeout: float | None = None
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ara-records-mcp",
        description="Ara Records MCP Server",
        epilog=(
            "Environment variables (lower priority than CLI args): "
            "ARA_API_SERVER, ARA_USERNAME, ARA_PASSWORD"
        ),
    )
    ap.add_argument("--api-server", dest="api_server", metavar="URL",
                    help=f"ARA API server URL (default: {DEFAULT_API_SERVER})")
    ap.add_argument("--username", metavar="USER", help="Username for HTTP Basic Authentication")
    ap.add_argument("--password", metavar="PASS", help="Password for HTTP Basic Authentication")
    return ap


def parse_args(argv: Sequence[str] | None = None) -> dict[str, str]:
    """
    Parse CLI flags and return only the ones that were actually given.
    """
    ns = build_arg_parser().parse_args(argv)
    return {k: v for k, v in vars(ns).items() if v}


def resolve_settings(
    cli: Mapping[str, str] | None = None,
    env: Mapping[str, str] | None = None,
) -> AraSettings:
    """
    Merge settings. Priority: CLI args > environment variables > defaults.
    Empty strings are treated as unset.
    """
    cli = cli or {}
    env = os.environ if env is None else env

    def pick(key: str, env_name: str) -> str | None:
        return cli.get(key) or env.get(env_name) or None

    return AraSettings(
        api_server=pick("api_server", "ARA_API_SERVER") or DEFAULT_API_SERVER,
        username=pick("username", "ARA_USERNAME"),
        password=pick("password", "ARA_PASSWORD"),
        http_timeout=_env_timeout(env.get("ARA_HTTP_TIMEOUT")),
        user_agent=env.get("ARA_HTTP_USER_AGENT") or DEFAULT_USER_AGENT,
    )


def configure_logging() -> None:
    """
    Configure logging explicitly. No import-time side effects.
    Idempotent: if logging is already configured, do nothing.

    Logs go to stderr; stdout carries the MCP stdio channel.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    level_name = os.getenv("ARA_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = os.getenv(
        "ARA_LOG_FORMAT",
        "%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logging.basicConfig(level=level, format=fmt, stream=sys.stderr)


def init_runtime(*, configure_logs: bool = True, load_env: bool = True) -> None:
    """
    Call this from entrypoints only (servers, scripts).
    """
    if load_env:
        load_env_once()
    if configure_logs:
        configure_logging()
