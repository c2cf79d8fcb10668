"""In-memory stand-ins for the ARA REST API used by unit tests.

`FakeSession` mimics the slice of `requests.Session` that `AraHttpClient`
uses. Routes are keyed by path + query (everything after the base URL).
"""

from __future__ import annotations

from typing import Any

import requests

BASE = "http://ara.test"


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, reason: str = "OK", *, bad_json: bool = False):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self._bad_json = bad_json

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, routes: dict[str, Any] | None = None, base: str = BASE):
        self.routes = dict(routes or {})
        self.base = base
        self.calls: list[dict[str, Any]] = []

    def request(self, method, url, headers=None, json=None, timeout=None, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": headers, "json": json, "timeout": timeout})
        key = url[len(self.base):] if url.startswith(self.base) else url
        route = self.routes.get(key)
        if route is None:
            return FakeResponse({"detail": "Not found."}, status_code=404, reason="Not Found")
        if isinstance(route, BaseException):
            raise route
        if isinstance(route, (FakeResponse, requests.Response)):
            return route
        return FakeResponse(route)

    @property
    def paths(self) -> list[str]:
        return [c["url"][len(self.base):] for c in self.calls]


def playbook_payload(playbook_id: int = 7, *, tasks: int = 10, results: int = 5, status: str = "running") -> dict:
    return {
        "id": playbook_id,
        "status": status,
        "path": "/home/ops/site.yml",
        "started": "2026-10-17T09:00:00.000000Z",
        "ended": None,
        "duration": "00:01:30.000000",
        "ansible_version": "2.17.4",
        "controller": "ctl-01",
        "user": "ops",
        "name": "site",
        "labels": [{"id": 1, "name": "prod"}],
        "items": {"plays": 2, "tasks": tasks, "results": results, "hosts": 3, "files": 4, "records": 0},
        "arguments": {"check": False},
    }


def tasks_payload(*ids: int) -> dict:
    return {
        "count": len(ids),
        "next": None,
        "previous": None,
        "results": [
            {
                "id": i,
                "name": f"task {i}",
                "status": "completed",
                "action": "ansible.builtin.command",
                "started": "2026-10-17T09:00:01.000000Z",
                "ended": "2026-10-17T09:00:02.000000Z",
                "duration": "00:00:01.000000",
                "tags": ["deploy"],
                "lineno": 12,
                "handler": False,
                "play": 1,
            }
            for i in ids
        ],
    }


def results_payload(*ids: int) -> dict:
    return {
        "count": len(ids),
        "next": None,
        "previous": None,
        "results": [
            {
                "id": i,
                "task": 100 + i,
                "host": 3,
                "status": "ok",
                "changed": bool(i % 2),
                "started": "2026-10-17T09:00:01.000000Z",
                "ended": "2026-10-17T09:00:02.000000Z",
                "duration": "00:00:01.000000",
                "ignore_errors": False,
                "delegated_to": [],
            }
            for i in ids
        ],
    }


CONNECTION_REFUSED = requests.ConnectionError("[Errno 111] Connection refused")
