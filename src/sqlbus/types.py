"""
Types for the sql bus.
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Optional

# ─── Message table timing ───────────────────────────────────────────────────
#
#   t=0          t=30s                      t=60s
#   |------------|--------------------------|-----> row age
#   visible to   not selected by polls      deleted by the next
#   polls                                   retention run
#
# Retention runs every RETENTION_MULTIPLIER poll intervals, so a row stays in
# the table long after it has left the visibility window and slow peers still
# get a chance to read it.

VISIBILITY_WINDOW = timedelta(seconds=30)
RETENTION_AGE = timedelta(seconds=60)
RETENTION_MULTIPLIER = 30

TABLE_NAME = "messenger"

# Watermark before any row has been seen. Serial/auto-increment ids start at 1.
NO_ID = 0

Channel = str


class TimeUnit(StrEnum):
    """Unit a poll interval is expressed in."""

    MILLISECONDS = "ms"
    SECONDS = "s"
    MINUTES = "min"
    HOURS = "h"

    def to_seconds(self, value: float) -> float:
        """Convert *value* expressed in this unit to seconds."""
        return value * _SECONDS_PER_UNIT[self]


_SECONDS_PER_UNIT = {
    TimeUnit.MILLISECONDS: 0.001,
    TimeUnit.SECONDS: 1.0,
    TimeUnit.MINUTES: 60.0,
    TimeUnit.HOURS: 3600.0,
}


class BrokerState(StrEnum):
    """
    Broker lifecycle:
    - STOPPED: no I/O; initial state and state after close() or a failed start().
    - STARTING: table creation and watermark read in progress.
    - ENABLED: publish, poll and retention paths are live.
    """

    STOPPED = "stopped"
    STARTING = "starting"
    ENABLED = "enabled"


@dataclass(frozen=True)
class Message:
    """One row read back from the message table."""

    id: int
    channel: Channel
    msg: Optional[str]

    @classmethod
    def from_row(cls, row) -> "Message":
        """Build a Message from a driver row (mapping access by column name)."""
        return cls(id=int(row["id"]), channel=row["channel"], msg=row["msg"])
