from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from .epoch import start_of_day, to_external_epoch, to_source_epoch
from .models import (
    STATE_COMPLETED,
    STATE_DROPPED,
    ChecklistItemRecord,
    SubTask,
    Task,
    TaskRecord,
)
from .omnifocus_db import TASK_FETCH_LIMIT, OmniFocusDB

logger = logging.getLogger(__name__)

Record = TypeVar("Record", TaskRecord, ChecklistItemRecord)


class OmniFocusSyncError(Exception):
    """Reading the OmniFocus logbook failed; nothing was returned."""


def drain(
    fetch_page: Callable[[float], Sequence[Record]],
    cursor: float,
    page_size: int = TASK_FETCH_LIMIT,
    label: str = "records",
) -> list[Record]:
    """Fetch every record completed after ``cursor``, one page at a time.

    Pages are ordered by completion date, so the last record of a page becomes
    the cursor for the next request. A page shorter than ``page_size`` ends the
    drain.

    The cursor comparison is strict: when a full page ends in the middle of a
    run of records sharing one completion date, the rest of that run is not
    requested again.
    """
    records: list[Record] = []
    while True:
        logger.debug("fetching %s from sqlite db...", label)
        batch = list(fetch_page(cursor))
        records.extend(batch)
        logger.debug("fetched %d %s from sqlite db", len(batch), label)

        if len(batch) < page_size:
            return records

        if batch[0].date_completed == batch[-1].date_completed:
            logger.warning(
                "full page of %s shares completion date %s; records past the page boundary are skipped",
                label,
                batch[-1].date_completed,
            )
        cursor = batch[-1].date_completed


def get_tasks_from_omnifocus_logbook(db: OmniFocusDB, latest_sync_time: float) -> list[TaskRecord]:
    # Start from the beginning of the day so tasks already written to today's note are re-read.
    cursor = to_source_epoch(start_of_day(latest_sync_time))
    try:
        return drain(db.get_task_records, cursor, db.page_size, label="tasks")
    except Exception as exc:
        logger.exception("Failed to query the OmniFocus SQLite DB at %s", db.db_path)
        raise OmniFocusSyncError("fetch tasks failed") from exc


def get_checklist_items_from_omnifocus_logbook(
    db: OmniFocusDB, latest_sync_time: float
) -> list[ChecklistItemRecord]:
    cursor = to_source_epoch(latest_sync_time)
    try:
        return drain(db.get_checklist_items, cursor, db.page_size, label="checklist items")
    except Exception as exc:
        logger.exception("Failed to query the OmniFocus SQLite DB at %s", db.db_path)
        raise OmniFocusSyncError("fetch checklist items failed") from exc


def _new_task(record: TaskRecord) -> Task:
    return Task(
        uuid=record.uuid,
        title=(record.title or "").rstrip(),
        notes=record.notes,
        folder=record.folder,
        tags=[record.tag],
        start_date=0,  # not tracked in the completion log
        stop_date=to_external_epoch(record.date_completed),
        cancelled=record.state == STATE_DROPPED,
    )


def build_tasks_from_records(
    task_records: Iterable[TaskRecord],
    checklist_records: Iterable[ChecklistItemRecord],
) -> list[Task]:
    """Fold the flat logbook rows into tasks.

    The tasks query yields one row per task and tag, so rows after the first
    for a uuid only contribute their tag. Checklist items are attached to their
    parent task; items whose parent was not fetched are dropped.
    """
    tasks: dict[str, Task] = {}
    for record in task_records:
        task = tasks.get(record.uuid)
        if task is None:
            tasks[record.uuid] = _new_task(record)
        else:
            task.tags.append(record.tag)

    for item in checklist_records:
        # a checklist item may be completed before its task
        parent = tasks.get(item.task_id)
        if parent is None:
            continue
        parent.subtasks.append(
            SubTask(completed=item.state == STATE_COMPLETED, title=item.title.rstrip())
        )

    return list(tasks.values())
