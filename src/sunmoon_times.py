"""
Sun Times Module

This module calculates the times of named solar events for a given date
and location:
- Solar noon and nadir
- Sunrise and sunset
- Civil, nautical and astronomical twilight
- Golden hour

Every event is defined by the altitude of the Sun (in degrees) and a pair of
names for its morning and evening crossing. A SunCalculator owns its list of
definitions; it is not synchronised, so callers sharing a calculator between
threads must serialise add_time() against other calls.
"""

import math
import numpy as np
from typing import Dict, List, Tuple
from dataclasses import dataclass
import logging

from sunmoon_julian import Instant, J2000, JulianDate, fractional_days_to_instant, to_days
from sunmoon_astro import (
    RAD, TWO_PI, acos, declination, ecliptic_longitude, solar_mean_anomaly,
    sun_position
)

logger = logging.getLogger(__name__)


# ============================================================================
# Constants and Configuration
# ============================================================================

class Config:
    """Configuration constants for sun time calculations"""

    # Correction of the mean solar transit, in days
    J0 = 0.0009

    # Coefficients of the equation of time, in days
    TRANSIT_SIN_M = 0.0053
    TRANSIT_SIN_2L = 0.0069

    # Sun altitude (degrees), morning event, evening event
    DEFAULT_SUN_TIMES = (
        (-0.833, 'sunrise', 'sunset'),
        (-0.3, 'sunriseEnd', 'sunsetStart'),
        (-6.0, 'dawn', 'dusk'),
        (-12.0, 'nauticalDawn', 'nauticalDusk'),
        (-18.0, 'nightEnd', 'night'),
        (6.0, 'goldenHourEnd', 'goldenHour'),
    )

    SOLAR_NOON = 'solarNoon'
    NADIR = 'nadir'


@dataclass(frozen=True)
class SunTimeDefinition:
    """Sun altitude threshold and the names of its morning/evening events"""
    angle: float  # degrees
    rise_name: str = ''
    set_name: str = ''


# ============================================================================
# Transit Calculations
# ============================================================================

def round_half_up(value: float, round_on: float = 0.5, places: int = 0) -> float:
    """
    Round on the fractional part of value.

    The signed fractional part is compared with round_on, so negative values
    always round down.
    """
    scale = math.pow(10, places)
    digit = scale * value
    if math.modf(digit)[0] >= round_on:
        rounded = math.ceil(digit)
    else:
        rounded = math.floor(digit)
    return rounded / scale


def julian_cycle(d: JulianDate, lw: float) -> float:
    """Number of the solar cycle containing a Julian date relative to J2000"""
    return round_half_up(d.fractional_days() - Config.J0 - lw / TWO_PI)


def approx_transit(ht: float, lw: float, n: float) -> float:
    """Approximate transit for an hour angle, in days since J2000"""
    return Config.J0 + (ht + lw) / TWO_PI + n


def solar_transit_j(ds: float, m: float, l: float) -> float:
    """Julian day of the transit, corrected by the equation of time"""
    return J2000 + ds + Config.TRANSIT_SIN_M * math.sin(m) - Config.TRANSIT_SIN_2L * math.sin(2 * l)


def hour_angle(h: float, phi: float, dec: float) -> float:
    """
    Hour angle at which the Sun reaches an altitude.

    Args:
        h: Altitude in radians
        phi: Observer latitude in radians
        dec: Sun declination in radians

    Returns:
        Hour angle in radians, nan if the Sun never reaches the altitude
    """
    return acos((math.sin(h) - math.sin(phi) * math.sin(dec)) / (math.cos(phi) * math.cos(dec)))


def get_set_j(h: float, lw: float, phi: float, dec: float, n: float, m: float, l: float) -> float:
    """Julian day of the evening crossing of altitude h"""
    w = hour_angle(h, phi, dec)
    a = approx_transit(w, lw, n)
    return solar_transit_j(a, m, l)


# ============================================================================
# Sun Calculator
# ============================================================================

class SunCalculator:
    """Sun position and sun times calculator"""

    def __init__(self):
        self._times: List[SunTimeDefinition] = [
            SunTimeDefinition(angle, rise_name, set_name)
            for angle, rise_name, set_name in Config.DEFAULT_SUN_TIMES
        ]

    @property
    def definitions(self) -> Tuple[SunTimeDefinition, ...]:
        """Snapshot of the configured sun time definitions"""
        return tuple(self._times)

    def get_position(self, instant: Instant, lat: float, lng: float) -> Tuple[float, float]:
        """
        Calculate sun position for a given instant and location.

        Args:
            instant: Absolute instant
            lat: Latitude in degrees
            lng: Longitude in degrees (east positive)

        Returns:
            Tuple of (azimuth, altitude) in radians
        """
        return sun_position(instant, lat, lng)

    def add_time(self, angle: float, rise_name: str, set_name: str) -> None:
        """
        Add a sun time definition.

        Args:
            angle: Sun altitude in degrees
            rise_name: Name of the morning event, empty to skip it
            set_name: Name of the evening event, empty to skip it
        """
        self._times.append(SunTimeDefinition(angle, rise_name, set_name))
        logger.debug(f"Added sun time {rise_name!r}/{set_name!r} at {angle:.3f} deg")

    def get_times(self, instant: Instant, lat: float, lng: float) -> Dict[str, np.datetime64]:
        """
        Calculate sun times for a given date and location.

        Args:
            instant: Any instant of the wanted date
            lat: Latitude in degrees
            lng: Longitude in degrees (east positive)

        Returns:
            Dictionary of event name to UTC instant (datetime64[ns]). Events the
            Sun never reaches at this date and latitude are NaT.
        """
        lw = RAD * -lng
        phi = RAD * lat
        d = to_days(instant)
        n = julian_cycle(d, lw)
        ds = approx_transit(0, lw, n)

        m = solar_mean_anomaly(JulianDate.from_fractional_days(ds))
        l = ecliptic_longitude(m)
        dec = declination(l, 0)

        j_noon = solar_transit_j(ds, m, l)

        result = {
            Config.SOLAR_NOON: fractional_days_to_instant(j_noon),
            Config.NADIR: fractional_days_to_instant(j_noon - 0.5),
        }
        for t in self._times:
            j_set = get_set_j(t.angle * RAD, lw, phi, dec, n, m, l)
            j_rise = j_noon - (j_set - j_noon)
            if math.isnan(j_set):
                logger.debug(f"Sun does not reach {t.angle:.3f} deg at latitude {lat:.4f}")
            if t.rise_name:
                result[t.rise_name] = fractional_days_to_instant(j_rise)
            if t.set_name:
                result[t.set_name] = fractional_days_to_instant(j_set)

        return result
