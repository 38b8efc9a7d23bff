from __future__ import annotations

import datetime
import enum
from dataclasses import dataclass
from typing import Optional


class DeadlineStatus(str, enum.Enum):
    MISSING = "missing"
    CONFIGURED = "configured"
    INVALID = "invalid"


class Phase(str, enum.Enum):
    REGISTER = "register"
    REVEAL = "reveal"


@dataclass(frozen=True)
class Deadline:
    status: DeadlineStatus
    value: Optional[datetime.datetime] = None

    @property
    def is_configured(self) -> bool:
        return self.status == DeadlineStatus.CONFIGURED


def parse_deadline(raw: Optional[str]) -> Deadline:
    if raw is None or not raw.strip():
        return Deadline(DeadlineStatus.MISSING)
    try:
        value = datetime.datetime.fromisoformat(raw.strip())
    except ValueError:
        return Deadline(DeadlineStatus.INVALID)
    return Deadline(DeadlineStatus.CONFIGURED, value)


def _comparable(now: datetime.datetime, deadline: datetime.datetime) -> datetime.datetime:
    if deadline.tzinfo is not None and now.tzinfo is None:
        return now.astimezone(deadline.tzinfo)
    if deadline.tzinfo is None and now.tzinfo is not None:
        return now.astimezone().replace(tzinfo=None)
    return now


def current_phase(deadline: Deadline, now: Optional[datetime.datetime] = None) -> Phase:
    """Registration stays open only until a configured deadline passes."""
    if not deadline.is_configured:
        return Phase.REVEAL
    if now is None:
        now = datetime.datetime.now()
    if _comparable(now, deadline.value) < deadline.value:
        return Phase.REGISTER
    return Phase.REVEAL
