from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict


class _Projection(BaseModel):
    # Raw ARA payloads carry many more fields; keep only the declared ones.
    model_config = ConfigDict(extra="ignore")


class TaskSummary(_Projection):
    id: Optional[int] = None
    name: Optional[str] = None
    status: Optional[str] = None
    action: Optional[str] = None
    started: Optional[str] = None
    ended: Optional[str] = None
    duration: Any = None
    tags: Any = None


class ResultSummary(_Projection):
    id: Optional[int] = None
    task: Any = None
    host: Any = None
    status: Optional[str] = None
    changed: Optional[bool] = None
    started: Optional[str] = None
    ended: Optional[str] = None
    duration: Any = None


class Progress(BaseModel):
    percent: int = 0
    tasks_total: int = 0
    tasks_completed: int = 0
    plays: Optional[int] = None
    hosts: Optional[int] = None


class PlaybookStatus(BaseModel):
    id: Optional[int] = None
    status: Optional[str] = None
    progress: Progress
    started: Optional[str] = None
    ended: Optional[str] = None
    duration: Any = None
    path: Optional[str] = None


class PlaybookSummary(PlaybookStatus):
    ansible_version: Optional[str] = None
    controller: Optional[str] = None
    user: Optional[str] = None
    labels: Any = None

    # Present only when the matching follow-up fetch succeeded.
    tasks: Optional[List[TaskSummary]] = None
    tasks_count: Optional[int] = None
    results: Optional[List[ResultSummary]] = None
    results_count: Optional[int] = None

    def to_payload(self) -> dict:
        out = self.model_dump()
        for key in ("tasks", "tasks_count", "results", "results_count"):
            if out.get(key) is None:
                out.pop(key, None)
        return out

    def status_view(self) -> PlaybookStatus:
        return PlaybookStatus.model_validate(self.model_dump(include=set(PlaybookStatus.model_fields)))
