import contextlib
import sqlite3
from pathlib import Path

import pytest

from oflogbook.omnifocus_db import OmniFocusDB

SCHEMA = """
CREATE TABLE Folder (persistentIdentifier TEXT PRIMARY KEY, name TEXT);
CREATE TABLE ProjectInfo (pk TEXT PRIMARY KEY, folder TEXT);
CREATE TABLE Tag (persistentIdentifier TEXT PRIMARY KEY, name TEXT);
CREATE TABLE TaskTag (task TEXT, tag TEXT);
CREATE TABLE Task (
    persistentIdentifier TEXT,
    name TEXT,
    note TEXT,
    dateCompleted REAL,
    taskState INTEGER,
    containingProjectInfo TEXT,
    parent TEXT
);
"""


TASK_DEFAULTS = {"note": "", "state": 1, "project": None, "parent": None}


def _write_db(
    path: Path,
    tasks: list[dict],
    tags: dict[str, str],
    task_tags: list[tuple[str, str]],
    folders: dict[str, str],
    projects: dict[str, str],
) -> None:
    with contextlib.closing(sqlite3.connect(path)) as conn:
        conn.executescript(SCHEMA)
        conn.executemany("INSERT INTO Folder VALUES (?, ?)", folders.items())
        conn.executemany("INSERT INTO ProjectInfo VALUES (?, ?)", projects.items())
        conn.executemany("INSERT INTO Tag VALUES (?, ?)", tags.items())
        conn.executemany("INSERT INTO TaskTag VALUES (?, ?)", task_tags)
        conn.executemany(
            "INSERT INTO Task VALUES (:uuid, :name, :note, :completed, :state, :project, :parent)",
            [{**TASK_DEFAULTS, **task} for task in tasks],
        )
        conn.commit()


@pytest.fixture
def make_omnifocus_db(tmp_path: Path):
    def _make(tasks, tags=None, task_tags=None, folders=None, projects=None, page_size=1000):
        path = tmp_path / "OmniFocusDatabase"
        _write_db(path, tasks, tags or {}, task_tags or [], folders or {}, projects or {})
        return OmniFocusDB(path, page_size=page_size)

    return _make
