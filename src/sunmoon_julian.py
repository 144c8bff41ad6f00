"""
Julian Date Module

This module provides the day/time representation every ephemeris calculation
is built on:
- JulianDate, a Julian day number plus nanoseconds since the start of that day
- Conversions between JulianDate and absolute instants
- Days since the J2000 epoch

A Julian day begins at noon UTC (see http://aa.quae.nl/en/reken/juliaansedag.html).
Instants are handled as numpy datetime64 values with nanosecond resolution;
instants beyond the datetime64[ns] range (1677-09-21 to 2262-04-11) come back
as datetime64[us].
"""

import math
import numpy as np
from datetime import datetime, timezone
from typing import Tuple, Union
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

DAY_SEC = 60 * 60 * 24
HALF_DAY_SEC = 60 * 60 * 12
NANO = 10**9
DAY_NANO = DAY_SEC * NANO
HALF_DAY_NANO = HALF_DAY_SEC * NANO
J1970 = 2440588  # Julian day number of 1970-01-01 12:00 UT
J2000 = 2451545  # Julian day number of 2000-01-01 12:00 UT

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
NOT_A_TIME = np.datetime64('NaT', 'ns')

# Nanoseconds per datetime64 unit; negative values divide
UNIT_NANO = {
    'W': 7 * DAY_NANO,
    'D': DAY_NANO,
    'h': 3600 * NANO,
    'm': 60 * NANO,
    's': NANO,
    'ms': 10**6,
    'us': 10**3,
    'ns': 1,
    'ps': -10**3,
    'fs': -10**6,
    'as': -10**9,
}

# datetime64 values are int64 counts, the minimum is NaT
INT64_MIN = -2**63 + 1
INT64_MAX = 2**63 - 1

Instant = Union[np.datetime64, datetime]


# ============================================================================
# Instant Conversion Functions
# ============================================================================

def to_unix_nanoseconds(instant: Instant) -> int:
    """
    Convert an instant to nanoseconds since the Unix epoch.

    Args:
        instant: numpy datetime64 (any unit) or datetime. Naive datetimes
                 are taken as UTC, aware ones are converted to UTC.
                 Units finer than nanoseconds are floored.

    Returns:
        Nanoseconds since 1970-01-01T00:00:00Z
    """
    if isinstance(instant, np.datetime64):
        if np.isnat(instant):
            raise ValueError("Cannot convert NaT to a Julian date")
        unit, count = np.datetime_data(instant.dtype)
        if unit in ('Y', 'M'):
            # calendar units have no fixed length
            instant = instant.astype('datetime64[D]')
            unit, count = 'D', 1
        value = int(instant.astype(np.int64)) * count
        factor = UNIT_NANO[unit]
        if factor < 0:
            return value // -factor
        return value * factor

    if isinstance(instant, datetime):
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        delta = instant - UNIX_EPOCH
        seconds = delta.days * DAY_SEC + delta.seconds
        return seconds * NANO + delta.microseconds * 1000

    raise TypeError(f"Unsupported instant type: {type(instant).__name__}")


def from_unix_nanoseconds(nanoseconds: int) -> np.datetime64:
    """
    Build a datetime64 from nanoseconds since the Unix epoch.

    Args:
        nanoseconds: Nanoseconds since 1970-01-01T00:00:00Z

    Returns:
        datetime64[ns] between 1677-09-21 and 2262-04-11. Instants outside
        that range are returned as datetime64[us], floored to the microsecond.
    """
    nanoseconds = int(nanoseconds)
    if INT64_MIN <= nanoseconds <= INT64_MAX:
        return np.datetime64(nanoseconds, 'ns')
    micros = nanoseconds // 1000
    if micros * 1000 != nanoseconds:
        logger.debug(f"Instant {nanoseconds} ns outside datetime64[ns] range, floored to microseconds")
    return np.datetime64(micros, 'us')


# ============================================================================
# Julian Date
# ============================================================================

@dataclass(frozen=True)
class JulianDate:
    """Julian day number and nanoseconds since the beginning of that day"""
    julian_day_number: int
    time: int = 0

    @classmethod
    def from_instant(cls, instant: Instant) -> 'JulianDate':
        """
        Convert an instant to a Julian date.

        Args:
            instant: Absolute instant (datetime64 or datetime)

        Returns:
            JulianDate with the day starting at noon UTC
        """
        d1970, nanos = divmod(to_unix_nanoseconds(instant), DAY_NANO)
        return cls._remove_half_day(d1970 + J1970, nanos)

    @classmethod
    def from_fractional_days(cls, days: float) -> 'JulianDate':
        """
        Create a Julian date from a real valued day count.

        The value is taken as already noon based, no half day shift is applied.

        Raises:
            ValueError: days is nan or infinite
        """
        if not math.isfinite(days):
            raise ValueError(f"No Julian date for {days} days")
        frac, whole = math.modf(days)
        return cls(int(whole), int(frac * DAY_SEC * 1e9))

    @classmethod
    def from_day_time(cls, julian_day_number: int, time: int) -> 'JulianDate':
        """Create a Julian date from a day number and nanoseconds of day"""
        return cls(julian_day_number, time)

    @staticmethod
    def _remove_half_day(julian_day_number: int, time: int) -> 'JulianDate':
        if time < HALF_DAY_NANO:
            return JulianDate(julian_day_number - 1, time + HALF_DAY_NANO)
        return JulianDate(julian_day_number, time - HALF_DAY_NANO)

    def to_instant(self) -> np.datetime64:
        """
        Convert back to an absolute instant.

        Returns:
            numpy datetime64 with nanosecond resolution (microseconds outside
            the datetime64[ns] range)
        """
        seconds = (self.julian_day_number - J1970) * DAY_SEC + HALF_DAY_SEC
        return from_unix_nanoseconds(seconds * NANO + self.time)

    def day_time(self) -> Tuple[int, int]:
        """Return the Julian day number and the nanoseconds since the beginning of the day"""
        return self.julian_day_number, self.time

    def fractional_days(self) -> float:
        """Day number plus the elapsed fraction of the day"""
        return float(self.julian_day_number) + float(self.time) / (DAY_SEC * 1e9)


def to_days(instant: Instant) -> JulianDate:
    """
    Calculate the Julian date relative to the J2000 epoch.

    Args:
        instant: Absolute instant

    Returns:
        JulianDate whose day number counts days since J2000
    """
    jd = JulianDate.from_instant(instant)
    return JulianDate(jd.julian_day_number - J2000, jd.time)


def fractional_days_to_instant(days: float) -> np.datetime64:
    """
    Convert a real valued Julian day to an instant.

    Args:
        days: Julian day (noon based)

    Returns:
        numpy datetime64, NaT when days is not a finite number
    """
    if not math.isfinite(days):
        return NOT_A_TIME
    return JulianDate.from_fractional_days(days).to_instant()
