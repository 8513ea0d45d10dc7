"""
Ledger time and the auction window.

The ledger never samples wall-clock time on its own. Time comes from a
ChainClock, the equivalent of the block timestamp of the next transaction,
which tests and scripts move forward explicitly.
"""

import time
from dataclasses import dataclass
from typing import Optional

from gavel.utils.logger import get_logger

logger = get_logger("clock")


@dataclass(frozen=True)
class AuctionWindow:
    """
    Half-open bidding interval [start_time, end_time).

    No ordering between start and end is enforced; a window with
    end <= start simply never opens.
    """
    start_time: int
    end_time: int

    def has_started(self, now: int) -> bool:
        return now >= self.start_time

    def has_ended(self, now: int) -> bool:
        return now >= self.end_time

    def contains(self, now: int) -> bool:
        """Whether bidding is open at `now`."""
        return self.has_started(now) and not self.has_ended(now)


class ChainClock:
    """
    Monotonic ledger timestamp.

    Attributes:
        timestamp: Current time in Unix seconds
    """

    def __init__(self, timestamp: Optional[int] = None):
        self.timestamp = int(time.time()) if timestamp is None else timestamp

    def now(self) -> int:
        return self.timestamp

    def increase_to(self, timestamp: int) -> int:
        """
        Move the clock to an absolute timestamp.

        Raises:
            ValueError: if the target is before the current time
        """
        if timestamp < self.timestamp:
            raise ValueError(
                f"Timestamp {timestamp} is lower than the current time {self.timestamp}"
            )
        self.timestamp = timestamp
        logger.debug(f"Clock moved to {timestamp}")
        return self.timestamp

    def increase(self, seconds: int) -> int:
        """Move the clock forward by a number of seconds."""
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards by {-seconds}s")
        return self.increase_to(self.timestamp + seconds)

    def __repr__(self) -> str:
        return f"ChainClock(timestamp={self.timestamp})"
