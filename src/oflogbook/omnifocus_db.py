from __future__ import annotations

import contextlib
import os
import sqlite3
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from .models import ChecklistItemRecord, TaskRecord

TASK_FETCH_LIMIT = 1000

DEFAULT_DB_PATH = (
    "~/Library/Containers/com.omnigroup.OmniFocus3/Data/Library/"
    "Application Support/OmniFocus/OmniFocus Caches/OmniFocusDatabase"
)

TASKS_QUERY = """
SELECT
    Task.persistentIdentifier AS uuid,
    Task.name AS title,
    Task.note AS notes,
    Task.dateCompleted AS date_completed,
    Task.taskState AS state,
    Folder.name AS folder,
    Tag.name AS tag
FROM
    Task
LEFT JOIN TaskTag
    ON TaskTag.task = Task.persistentIdentifier
LEFT JOIN Tag
    ON Tag.persistentIdentifier = TaskTag.tag
LEFT JOIN ProjectInfo
    ON Task.containingProjectInfo = ProjectInfo.pk
LEFT JOIN Folder
    ON ProjectInfo.folder = Folder.persistentIdentifier
WHERE
    Task.dateCompleted IS NOT NULL
    AND Task.dateCompleted > ?
    AND Task.taskState IN (1, 2)
ORDER BY
    Task.dateCompleted
LIMIT ?
"""

CHECKLIST_ITEMS_QUERY = """
SELECT
    Task.persistentIdentifier AS uuid,
    Task.parent AS task_id,
    Task.name AS title,
    Task.taskState AS state,
    Task.dateCompleted AS date_completed
FROM
    Task
WHERE
    Task.parent IS NOT NULL
    AND Task.dateCompleted IS NOT NULL
    AND Task.dateCompleted > ?
    AND Task.name IS NOT NULL
    AND Task.name != ''
ORDER BY
    Task.dateCompleted
LIMIT ?
"""

_task_records = TypeAdapter(list[TaskRecord])
_checklist_records = TypeAdapter(list[ChecklistItemRecord])


def query_sqlite_db(db_path: Path, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
    """Run one statement against a read-only connection and return the rows as dicts."""
    uri = f"{db_path.expanduser().resolve().as_uri()}?mode=ro"
    with contextlib.closing(sqlite3.connect(uri, uri=True, timeout=30.0)) as conn:
        conn.row_factory = sqlite3.Row
        rows = conn.execute(sql, params).fetchall()
    return [dict(row) for row in rows]


class OmniFocusDB:
    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH, page_size: int = TASK_FETCH_LIMIT) -> None:
        self.db_path = Path(os.path.expanduser(str(db_path)))
        self.page_size = page_size

    @classmethod
    def from_env(cls) -> OmniFocusDB:
        return cls(os.getenv("OMNIFOCUS_DB_PATH", DEFAULT_DB_PATH))

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        return query_sqlite_db(self.db_path, sql, params)

    def get_task_records(self, cursor: float) -> list[TaskRecord]:
        rows = self._query(TASKS_QUERY, (cursor, self.page_size))
        return _task_records.validate_python(rows)

    def get_checklist_items(self, cursor: float) -> list[ChecklistItemRecord]:
        rows = self._query(CHECKLIST_ITEMS_QUERY, (cursor, self.page_size))
        return _checklist_records.validate_python(rows)
