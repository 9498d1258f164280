"""Clock boundary used for status refresh and simulation anchoring."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current calendar date."""

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the local system date."""

    def today(self) -> date:
        return date.today()


@dataclass
class FixedClock:
    """Clock pinned to a given date, moved only by ``advance``."""

    current: date

    def today(self) -> date:
        return self.current

    def advance(self, days: int) -> None:
        self.current = self.current + timedelta(days=days)
