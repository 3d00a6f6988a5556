"""Console timer: date, time of day, frame and cycle counters."""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum
from typing import Optional

SECONDS_PER_DAY = 86400
FRAMES_PER_SECOND = 60


class TimerPort(IntEnum):
    """Local port numbers of the timer."""

    CURRENT_DATE = 0
    CURRENT_TIME = 1
    FRAME_COUNTER = 2
    CYCLE_COUNTER = 3


class Timer:
    """Keeps the console's clock, advancing it one frame at a time.

    The date is stored as ``(year << 16) | day_of_year`` with days counted from 0,
    and the time as seconds elapsed in the current day.
    """

    def __init__(self, now: Optional[datetime] = None) -> None:
        moment = now if now is not None else datetime.now()
        day_of_year = moment.timetuple().tm_yday - 1
        self.current_date = (moment.year << 16) | day_of_year
        self.current_time = moment.hour * 3600 + moment.minute * 60 + moment.second
        self.frame_counter = 0
        self.cycle_counter = 0

    def read_port(self, local_port: int) -> int:
        """Return the value of a timer port; raise ValueError for unknown ports."""
        try:
            port = TimerPort(local_port)
        except ValueError:
            raise ValueError(f"timer has no port {local_port}") from None
        if port is TimerPort.FRAME_COUNTER:
            return self.frame_counter
        if port is TimerPort.CYCLE_COUNTER:
            return self.cycle_counter
        if port is TimerPort.CURRENT_TIME:
            return self.current_time
        return self.current_date

    def write_port(self, local_port: int, value: int) -> None:
        """Reject the write: every timer port is read-only."""
        raise ValueError(f"timer port {local_port} is read-only")

    def run_next_cycle(self) -> None:
        """Count one CPU cycle within the current frame."""
        self.cycle_counter += 1

    def change_frame(self) -> None:
        """Start a new frame, advancing time and date as needed."""
        self.cycle_counter = 0
        self.frame_counter += 1

        if self.frame_counter % FRAMES_PER_SECOND == 0:
            self.current_time += 1

        if self.current_time >= SECONDS_PER_DAY:
            self.current_time = 0
            self.current_date += 1

            year = self.current_date >> 16
            is_leap_year = year % 4 == 0 and year % 100 != 0
            days_this_year = 366 if is_leap_year else 365
            days = self.current_date & 0xFFFF
            if days >= days_this_year:
                self.current_date = (year + 1) << 16

    def reset(self) -> None:
        """Clear the frame and cycle counters; date and time are kept."""
        self.cycle_counter = 0
        self.frame_counter = 0