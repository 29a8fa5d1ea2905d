from __future__ import annotations

from datetime import datetime

# OmniFocus stores Core Data timestamps (seconds since 2001-01-01),
# Unix timestamps count from 1970-01-01.
CORE_DATA_EPOCH_OFFSET = 978307200

Timestamp = int | float


def to_source_epoch(unix_timestamp: Timestamp) -> Timestamp:
    return unix_timestamp - CORE_DATA_EPOCH_OFFSET


def to_external_epoch(omnifocus_timestamp: Timestamp) -> Timestamp:
    return omnifocus_timestamp + CORE_DATA_EPOCH_OFFSET


def start_of_day(unix_timestamp: Timestamp) -> int:
    """Unix timestamp of local midnight on the day containing ``unix_timestamp``."""
    moment = datetime.fromtimestamp(unix_timestamp)
    midnight = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp())
