"""
ARA Records MCP server.

Exposes the ARA REST API as seven read-only `ara://` resources and three tools:

- ara_query:            generic GET/POST pass-through with pagination defaults
- watch_playbook:       playbook summary with task/result progress
- get_playbook_status:  cheap status/progress poll

Remote failures inside tools are returned as text (``Error...``) so the calling
agent always gets parseable content. Unknown resources and tools are protocol
faults.
"""

import asyncio
import json
import logging
import os
from typing import Annotated, Any, Literal, Optional, Sequence

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ara_common.tooling import InstrumentConfig, instrument_async_tool
from ara_config.settings import AraSettings, init_runtime, parse_args, resolve_settings

from .aggregator import PlaybookAggregator
from .core_infrastructure.http_client import AraHttpClient
from .endpoints import (
    RESOURCES,
    ResourceDescriptor,
    add_pagination_defaults,
    map_resource_uri_to_endpoint,
)
from .errors import AraApiError, AraMcpError, PlaybookFetchError, UnknownToolError


logger = logging.getLogger(__name__)

SERVER_NAME = "ara-api"
TOOL_NAMES = ("ara_query", "watch_playbook", "get_playbook_status")


def to_json_text(data: Any) -> str:
    return json.dumps(data, indent=2)


class AraFastMCP(FastMCP):
    """FastMCP with the fixed resource/tool tables enforced up front."""

    async def call_tool(self, name: str, arguments: dict[str, Any]):
        if name not in TOOL_NAMES:
            raise UnknownToolError(name)
        return await super().call_tool(name, arguments)

    async def read_resource(self, uri):
        # AnyUrl may add a trailing slash on some pydantic versions
        map_resource_uri_to_endpoint(str(uri).rstrip("/"))
        return await super().read_resource(uri)


# ---------------------------------------------------------------------------
# Tool bodies
# ---------------------------------------------------------------------------


async def run_query(client: AraHttpClient, endpoint: str, method: str = "GET", body: Optional[dict] = None) -> str:
    path = add_pagination_defaults(endpoint)
    try:
        data = await asyncio.to_thread(client.request, method, path, body)
    except AraApiError as e:
        return f"Error: {e}"
    return to_json_text(data)


async def run_watch(
    aggregator: PlaybookAggregator,
    playbook_id: int,
    include_tasks: bool = True,
    include_results: bool = False,
) -> str:
    try:
        details = await asyncio.to_thread(aggregator.watch, playbook_id, include_tasks, include_results)
    except PlaybookFetchError as e:
        return f"Error monitoring playbook {playbook_id}: {e}"
    return to_json_text(details)


async def run_status(aggregator: PlaybookAggregator, playbook_id: int) -> str:
    try:
        status = await asyncio.to_thread(aggregator.status, playbook_id)
    except PlaybookFetchError as e:
        return f"Error checking playbook {playbook_id} status: {e}"
    return to_json_text(status)


async def read_resource_text(client: AraHttpClient, uri: str) -> str:
    path = add_pagination_defaults(map_resource_uri_to_endpoint(uri))
    try:
        data = await asyncio.to_thread(client.get, path)
    except AraApiError as e:
        raise AraMcpError(f"Failed to fetch from Ara API: {e}") from e
    return to_json_text(data)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def _instrument(kind: str, name: str):
    return instrument_async_tool(InstrumentConfig(kind=kind, name=name))


def _register_resource(mcp: FastMCP, client: AraHttpClient, res: ResourceDescriptor) -> None:
    async def read() -> str:
        return await read_resource_text(client, res.uri)

    read.__name__ = f"read_{res.uri.split('://', 1)[-1]}"
    mcp.resource(
        res.uri,
        name=res.name,
        description=res.description,
        mime_type=res.mime_type,
    )(_instrument("resource", res.uri)(read))


def register_resources(mcp: FastMCP, client: AraHttpClient) -> None:
    for res in RESOURCES:
        _register_resource(mcp, client, res)


def register_tools(mcp: FastMCP, client: AraHttpClient, aggregator: PlaybookAggregator) -> None:

    @mcp.tool(
        name="ara_query",
        description="Query Ara API endpoints with automatic pagination defaults (limit=3, order=-started)",
        structured_output=False,
    )
    @_instrument("tool", "ara_query")
    async def ara_query(
        endpoint: Annotated[str, Field(description=(
            "API endpoint path (e.g., /api/v1/playbooks, /api/v1/plays/1). Supports query parameters "
            "like ?limit=10&offset=20&order=-started. If no limit is specified, defaults to 3 results."
        ))],
        method: Literal["GET", "POST"] = "GET",
        body: Annotated[Optional[dict[str, Any]], Field(description="Request body for POST requests")] = None,
    ) -> str:
        return await run_query(client, endpoint, method, body)

    @mcp.tool(
        name="watch_playbook",
        description=(
            "Monitor a playbook execution in real-time. Returns detailed progress including task completion, "
            "current status, and execution timeline. Call repeatedly to track progress."
        ),
        structured_output=False,
    )
    @_instrument("tool", "watch_playbook")
    async def watch_playbook(
        playbook_id: Annotated[int, Field(description="The ID of the playbook to monitor")],
        include_tasks: Annotated[bool, Field(description="Include detailed task information (default: true)")] = True,
        include_results: Annotated[bool, Field(
            description="Include task result details (default: false, can be verbose)"
        )] = False,
    ) -> str:
        return await run_watch(aggregator, playbook_id, include_tasks, include_results)

    @mcp.tool(
        name="get_playbook_status",
        description=(
            "Get a quick summary of playbook execution status without detailed task information. "
            "Useful for checking if a playbook is complete or monitoring multiple playbooks."
        ),
        structured_output=False,
    )
    @_instrument("tool", "get_playbook_status")
    async def get_playbook_status(
        playbook_id: Annotated[int, Field(description="The ID of the playbook to check")],
    ) -> str:
        return await run_status(aggregator, playbook_id)


def create_server(settings: AraSettings, *, client: AraHttpClient | None = None) -> AraFastMCP:
    client = client or AraHttpClient(settings)
    aggregator = PlaybookAggregator(client)

    mcp = AraFastMCP(
        name=SERVER_NAME,
        instructions="Read-only bridge to an ARA (Ansible Run Analysis) server: playbooks, plays, tasks, hosts, results.",
    )
    register_resources(mcp, client)
    register_tools(mcp, client, aggregator)
    logger.debug("MCP server configured for %s", settings.api_server)
    return mcp


def main(argv: Sequence[str] | None = None) -> None:
    # Entry points (console_scripts) call main() directly, so we must perform
    # runtime initialization here (dotenv + logging).
    init_runtime()
    settings = resolve_settings(parse_args(argv))

    logger.info("ARA_API_SERVER: %s", settings.api_server)
    logger.info("ARA_USERNAME: %s", settings.username)
    logger.info("ARA_PASSWORD: %s", "***SET***" if settings.password else "***NOT SET***")

    mcp = create_server(settings)
    transport = os.environ.get("MCP_TRANSPORT", "stdio")
    mcp.run(transport=transport)


if __name__ == "__main__":
    main()
