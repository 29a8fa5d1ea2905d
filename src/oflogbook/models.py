from __future__ import annotations

from pydantic import BaseModel, Field

# Task.taskState: 0 = available, 1 = completed, 2 = dropped
STATE_COMPLETED = 1
STATE_DROPPED = 2


class TaskRecord(BaseModel):
    uuid: str
    title: str | None = None
    notes: str | None = None
    folder: str | None = None
    date_completed: int | float
    state: int
    tag: str | None = None


class ChecklistItemRecord(BaseModel):
    uuid: str
    task_id: str
    title: str
    state: int
    date_completed: int | float


class SubTask(BaseModel):
    completed: bool
    title: str


class Task(BaseModel):
    uuid: str
    title: str
    notes: str | None = None
    folder: str | None = None
    tags: list[str | None] = Field(default_factory=list)
    start_date: int | float = 0
    stop_date: int | float
    cancelled: bool = False
    subtasks: list[SubTask] = Field(default_factory=list)

    @property
    def tag_names(self) -> list[str]:
        """Tags without the placeholder left by untagged rows."""
        return [tag for tag in self.tags if tag is not None]
