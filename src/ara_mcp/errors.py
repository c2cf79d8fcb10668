"""Exception hierarchy for the ARA MCP bridge."""

from __future__ import annotations


class AraMcpError(Exception):
    """Base exception for the bridge."""


class UnknownResourceError(AraMcpError, LookupError):
    """Resource URI is not one of the fixed ara:// resources."""

    def __init__(self, uri: str):
        self.uri = uri
        super().__init__(f"Unknown resource: {uri}")


class UnknownToolError(AraMcpError, LookupError):
    """Tool name is not registered on the server."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class AraApiError(AraMcpError):
    """A call to the remote ARA API failed."""

    def __init__(self, message: str, *, url: str):
        self.url = url
        super().__init__(message)


class HttpError(AraApiError):
    """The API answered with a non-2xx status."""

    def __init__(self, status: int, status_text: str, url: str):
        self.status = status
        self.status_text = status_text
        super().__init__(f"HTTP {status}: {status_text} - URL: {url}", url=url)


class NetworkError(AraApiError):
    """Transport failure before any HTTP status was obtained."""

    def __init__(self, url: str, cause: BaseException):
        self.cause = cause
        super().__init__(f"Network error for {url}: {cause}", url=url)


class ResponseDecodeError(AraApiError):
    """Response body was not valid JSON."""

    def __init__(self, url: str, status: int):
        self.status = status
        super().__init__(f"Invalid JSON in response (status {status}) - URL: {url}", url=url)


class PlaybookFetchError(AraMcpError):
    """The mandatory playbook record could not be fetched."""

    def __init__(self, playbook_id: int, cause: BaseException | str):
        self.playbook_id = playbook_id
        super().__init__(f"Failed to fetch playbook details: {cause}")
