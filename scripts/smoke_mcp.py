"""
Smoke script for the ARA MCP gateway over stdio.

It performs:
 1) Spawns the gateway module and lists tools and resources
 2) Reads ara://running
 3) Calls get_playbook_status for ARA_SMOKE_PLAYBOOK_ID (default 1)

Point it at a live server with ARA_API_SERVER / ARA_USERNAME / ARA_PASSWORD.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

_REPO_ROOT = Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"


def _text(res) -> str:
    content = getattr(res, "content", None) or getattr(res, "contents", None)
    if not content:
        return str(res)
    return getattr(content[0], "text", str(content[0]))


async def demo_mcp() -> bool:
    # Lazy import: only needed when the smoke run actually starts
    from mcp import ClientSession
    from mcp.client.stdio import stdio_client, StdioServerParameters

    gateway_module = os.getenv("ARA_GATEWAY_MODULE", "ara_mcp.gateway")
    python_cmd = os.getenv("MCP_PYTHON") or sys.executable
    playbook_id = int(os.getenv("ARA_SMOKE_PLAYBOOK_ID", "1"))

    print(f"[smoke] Repo root: {_REPO_ROOT}")
    print(f"[smoke] Gateway module: {gateway_module}")
    print(f"[smoke] ARA server: {os.getenv('ARA_API_SERVER', 'http://localhost:8000')}")

    env = dict(os.environ, MCP_TRANSPORT="stdio")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(_SRC), env.get("PYTHONPATH", "")) if p)
    server = StdioServerParameters(command=python_cmd, args=["-m", gateway_module], env=env)

    ok = True

    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            print("\n[smoke] TOOLS:")
            for t in tools.tools:
                print(f" - {t.name}")

            resources = await session.list_resources()
            print("\n[smoke] RESOURCES:")
            for r in resources.resources:
                print(f" - {r.uri}  ({r.name})")

            try:
                res = await session.read_resource("ara://running")
                print("\n[smoke] READ ara://running:")
                print(_text(res))
            except Exception as e:
                print(f"[smoke] WARN: ara://running failed: {e}")
                ok = False

            res = await session.call_tool("get_playbook_status", {"playbook_id": playbook_id})
            out = _text(res)
            print(f"\n[smoke] CALL get_playbook_status(playbook_id={playbook_id}):")
            print(out)
            if out.startswith("Error"):
                ok = False

    return ok


async def main() -> int:
    ok = await demo_mcp()
    print("\n[smoke] OK" if ok else "\n[smoke] Completed with warnings")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
