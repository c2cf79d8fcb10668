from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .core_infrastructure.http_client import AraHttpClient
from .endpoints import playbook_children_path, playbook_path
from .errors import AraApiError, PlaybookFetchError
from .models import PlaybookSummary, Progress, ResultSummary, TaskSummary


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def progress_percent(completed: int, total: int) -> int:
    """Share of finished tasks, rounded half up; 0 when nothing is scheduled yet."""
    if total <= 0:
        return 0
    return int(completed * 100 / total + 0.5)


class PlaybookAggregator:
    """
    Builds a denormalized view of one playbook from the ARA API.

    The playbook record itself is mandatory. Task and result lists are
    best-effort: if either fetch fails the field is left out of the summary.
    """

    def __init__(self, client: AraHttpClient) -> None:
        self.client = client

    # ---- internal helpers -------------------------------------------------
    def _fetch_children(self, collection: str, playbook_id: int, model: Type[M]) -> Optional[tuple[List[M], Any]]:
        try:
            data = self.client.get(playbook_children_path(collection, playbook_id))
            rows = [model.model_validate(r) for r in data["results"]]
        except (AraApiError, ValidationError, KeyError, TypeError) as e:
            logger.debug("Skipping %s for playbook %s: %s", collection, playbook_id, e)
            return None
        return rows, data.get("count")

    def _summarize(self, playbook: Any) -> PlaybookSummary:
        if not isinstance(playbook, dict):
            raise TypeError(f"expected a playbook object, got {type(playbook).__name__}")
        items = playbook.get("items") or {}
        total = int(items.get("tasks") or 0)
        completed = int(items.get("results") or 0)

        return PlaybookSummary(
            id=playbook.get("id"),
            status=playbook.get("status"),
            path=playbook.get("path"),
            started=playbook.get("started"),
            ended=playbook.get("ended"),
            duration=playbook.get("duration"),
            ansible_version=playbook.get("ansible_version"),
            controller=playbook.get("controller"),
            user=playbook.get("user"),
            progress=Progress(
                percent=progress_percent(completed, total),
                tasks_total=total,
                tasks_completed=completed,
                plays=items.get("plays"),
                hosts=items.get("hosts"),
            ),
            labels=playbook.get("labels"),
        )

    # ---- primary use cases ------------------------------------------------
    def fetch_playbook_details(
        self,
        playbook_id: int,
        include_tasks: bool = True,
        include_results: bool = False,
    ) -> PlaybookSummary:
        try:
            summary = self._summarize(self.client.get(playbook_path(playbook_id)))
        except (AraApiError, AttributeError, TypeError, ValueError) as e:
            raise PlaybookFetchError(playbook_id, e) from e

        if include_tasks:
            fetched = self._fetch_children("tasks", playbook_id, TaskSummary)
            if fetched is not None:
                summary.tasks, summary.tasks_count = fetched

        if include_results:
            fetched = self._fetch_children("results", playbook_id, ResultSummary)
            if fetched is not None:
                summary.results, summary.results_count = fetched

        return summary

    def watch(self, playbook_id: int, include_tasks: bool = True, include_results: bool = False) -> dict:
        return self.fetch_playbook_details(playbook_id, include_tasks, include_results).to_payload()

    def status(self, playbook_id: int) -> dict:
        details = self.fetch_playbook_details(playbook_id, include_tasks=False, include_results=False)
        return details.status_view().model_dump()


