# ABOUTME: Time unit enumeration used to express rate limits
# ABOUTME: Converts "N requests per unit" configuration into window periods

from datetime import timedelta
from enum import Enum


class TimeUnit(str, Enum):
    """
    Enumeration of the time units a request limit can be expressed in.

    A limit of "10 requests per minute" is ``TimeUnit.MINUTES`` with a request
    limit of 10; the admission gate then counts against a window of one unit.

    Attributes:
        MILLISECONDS (str): One thousandth of a second.
        SECONDS (str): One second.
        MINUTES (str): Sixty seconds.
        HOURS (str): Sixty minutes.
        DAYS (str): Twenty-four hours.
    """

    MILLISECONDS = "milliseconds"
    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @classmethod
    def _missing_(cls, value: object) -> "TimeUnit | None":
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized or member.name.lower() == normalized:
                    return member
        return None

    def to_timedelta(self, amount: float = 1) -> timedelta:
        """
        Convert an amount of this unit into a ``timedelta``.

        Args:
            amount: Number of units. Defaults to 1.

        Returns:
            The equivalent duration.
        """
        return timedelta(**{self.value: amount})

    @property
    def seconds(self) -> float:
        """Length of one unit in seconds."""
        return self.to_timedelta().total_seconds()
