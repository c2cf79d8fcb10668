"""Resource table and path normalization for the ARA REST API.

Resources are a fixed set of ``ara://`` URIs, each backed by a collection
endpoint under ``/api/v1``. Every outgoing path goes through
:func:`add_pagination_defaults` so a single call cannot return the whole
history of a busy ARA server.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import parse_qsl, urlencode, urlsplit

from .errors import UnknownResourceError

API_PATH = "/api/v1"
JSON_MIME = "application/json"

DEFAULT_LIMIT = 3
DEFAULT_ORDER = "-started"
# Collections whose records carry a `started` timestamp.
CHRONOLOGICAL_COLLECTIONS = ("/playbooks", "/plays", "/tasks", "/results")

# Follow-up fetches made when summarizing a single playbook.
CHILDREN_LIMIT = 100
CHILDREN_ORDER = "started"


@dataclass(frozen=True)
class ResourceDescriptor:
    uri: str
    name: str
    description: str
    endpoint: str
    mime_type: str = JSON_MIME


RESOURCES: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor("ara://playbooks", "Ara Playbooks",
                       "List of recorded Ansible playbooks", f"{API_PATH}/playbooks"),
    ResourceDescriptor("ara://plays", "Ara Plays",
                       "List of recorded Ansible plays", f"{API_PATH}/plays"),
    ResourceDescriptor("ara://tasks", "Ara Tasks",
                       "List of recorded Ansible tasks", f"{API_PATH}/tasks"),
    ResourceDescriptor("ara://hosts", "Ara Hosts",
                       "List of recorded Ansible hosts", f"{API_PATH}/hosts"),
    ResourceDescriptor("ara://results", "Ara Results",
                       "List of recorded Ansible task results", f"{API_PATH}/results"),
    ResourceDescriptor("ara://latesthosts", "Ara Latest Hosts",
                       "Latest playbook result for each host", f"{API_PATH}/latesthosts"),
    ResourceDescriptor("ara://running", "Running Playbooks",
                       "Currently executing Ansible playbooks (for real-time monitoring)",
                       f"{API_PATH}/playbooks?status=running"),
)

RESOURCE_ENDPOINTS = MappingProxyType({r.uri: r.endpoint for r in RESOURCES})


def map_resource_uri_to_endpoint(uri: str) -> str:
    try:
        return RESOURCE_ENDPOINTS[uri]
    except KeyError:
        raise UnknownResourceError(uri) from None


def add_pagination_defaults(path: str) -> str:
    """
    Append `limit` (always) and `order` (chronological collections only) when
    the caller did not supply them.

    The existing query string is kept verbatim; defaults are appended after it.
    """
    parts = urlsplit(path)
    base = parts.path if parts.path.startswith("/") else f"/{parts.path}"
    present = {k for k, _ in parse_qsl(parts.query, keep_blank_values=True)}

    defaults: list[tuple[str, str]] = []
    if "limit" not in present:
        defaults.append(("limit", str(DEFAULT_LIMIT)))
    if "order" not in present and any(c in base for c in CHRONOLOGICAL_COLLECTIONS):
        defaults.append(("order", DEFAULT_ORDER))

    query = "&".join(q for q in (parts.query, urlencode(defaults)) if q)
    return f"{base}?{query}" if query else base


def playbook_path(playbook_id: int) -> str:
    return f"{API_PATH}/playbooks/{playbook_id}"


def playbook_children_path(collection: str, playbook_id: int) -> str:
    """Tasks or results of one playbook, oldest first."""
    query = urlencode({"playbook": playbook_id, "limit": CHILDREN_LIMIT, "order": CHILDREN_ORDER})
    return f"{API_PATH}/{collection}?{query}"
