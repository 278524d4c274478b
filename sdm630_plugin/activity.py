"""Scheduling window for the host's activity runner."""
from dataclasses import dataclass
from enum import Enum

SECONDS_PER_DAY = 86400


class TimeEvent(Enum):
    TIME = "time"
    SUNRISE = "sunrise"
    SUNSET = "sunset"


class TimeUnit(Enum):
    SECONDS = 1
    MINUTES = 60
    HOURS = 3600

    def to_seconds(self, amount):
        return amount * self.value


@dataclass(frozen=True)
class Activity:
    """
    When and how often the host calls `do_activity_work`.
    Offsets are seconds from midnight for TIME events, or from the sun event otherwise.
    """
    start_event: TimeEvent
    start_offset: int
    end_event: TimeEvent
    end_offset: int
    interval: int
    time_unit: TimeUnit = TimeUnit.SECONDS

    def __post_init__(self):
        if self.interval <= 0:
            raise ValueError(f"Activity interval must be positive, got {self.interval}")
        for event, offset in ((self.start_event, self.start_offset), (self.end_event, self.end_offset)):
            if event is TimeEvent.TIME and not 0 <= offset < SECONDS_PER_DAY:
                raise ValueError(f"Time offset {offset} outside 0..{SECONDS_PER_DAY - 1}")

    @property
    def interval_seconds(self):
        return self.time_unit.to_seconds(self.interval)

    def is_active_at(self, seconds_of_day):
        """True if a TIME window covers `seconds_of_day` (inclusive). Sun events are resolved by the host."""
        if self.start_event is not TimeEvent.TIME or self.end_event is not TimeEvent.TIME:
            raise ValueError("Only TIME based windows can be evaluated without sun data")
        if self.start_offset <= self.end_offset:
            return self.start_offset <= seconds_of_day <= self.end_offset
        # window wraps around midnight
        return seconds_of_day >= self.start_offset or seconds_of_day <= self.end_offset
