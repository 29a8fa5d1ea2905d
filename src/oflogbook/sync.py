from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .logbook import (
    build_tasks_from_records,
    get_checklist_items_from_omnifocus_logbook,
    get_tasks_from_omnifocus_logbook,
)
from .models import Task
from .omnifocus_db import OmniFocusDB
from .settings import LogbookSettings
from .storage import logbook_path, write_json

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    tasks: list[Task]
    started_at: int
    counts: dict[str, int]

    def next_settings(self, settings: LogbookSettings) -> LogbookSettings:
        """Settings to persist once this sync has been written out."""
        return settings.model_copy(update={"latest_sync_time": self.started_at})


def run_sync(db: OmniFocusDB, settings: LogbookSettings) -> SyncResult:
    started_at = int(time.time())
    latest_sync_time = settings.latest_sync_time

    task_records = get_tasks_from_omnifocus_logbook(db, latest_sync_time)
    checklist_records = get_checklist_items_from_omnifocus_logbook(db, latest_sync_time)
    tasks = build_tasks_from_records(task_records, checklist_records)

    counts = {
        "task_records": len(task_records),
        "checklist_records": len(checklist_records),
        "tasks": len(tasks),
        "cancelled": sum(1 for task in tasks if task.cancelled),
    }
    logger.info("synced %d tasks from %d records since %d", len(tasks), len(task_records), latest_sync_time)
    return SyncResult(tasks=tasks, started_at=started_at, counts=counts)


def write_logbook(base_dir: Path, result: SyncResult) -> Path:
    timestamp = datetime.fromtimestamp(result.started_at).strftime("%Y-%m-%d_%H%M")
    path = logbook_path(base_dir, timestamp)
    write_json(path, [task.model_dump() for task in result.tasks])
    return path
