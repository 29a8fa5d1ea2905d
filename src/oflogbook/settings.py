from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from .storage import read_json, settings_path, write_json

logger = logging.getLogger(__name__)

DEFAULT_SECTION_HEADING = "## Logbook"
DEFAULT_SYNC_FREQUENCY_SECONDS = 30 * 60
DEFAULT_TAG_PREFIX = "logbook/"
DEFAULT_CANCELLED_MARK = "c"


class LogbookSettings(BaseModel):
    """Persisted options. Only ``latest_sync_time`` feeds the sync itself."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    has_accepted_disclaimer: bool = False
    latest_sync_time: int = 0

    does_sync_note_body: bool = True
    does_sync_project: bool = False
    does_add_newline_before_headings: bool = False
    is_sync_enabled: bool = False
    sync_interval: int = DEFAULT_SYNC_FREQUENCY_SECONDS
    section_heading: str = DEFAULT_SECTION_HEADING
    tag_prefix: str = DEFAULT_TAG_PREFIX
    canceled_mark: str = DEFAULT_CANCELLED_MARK


def load_settings(base_dir: Path) -> LogbookSettings:
    path = settings_path(base_dir)
    if not path.exists():
        return LogbookSettings()
    return LogbookSettings.model_validate(read_json(path))


def save_settings(base_dir: Path, settings: LogbookSettings) -> None:
    write_json(settings_path(base_dir), settings.model_dump())


def write_options(base_dir: Path, **changes: Any) -> LogbookSettings:
    current = load_settings(base_dir)
    updated = LogbookSettings.model_validate({**current.model_dump(), **changes})
    save_settings(base_dir, updated)
    logger.debug("updated settings: %s", sorted(changes))
    return updated
