"""
Astronomical Calculation Module for Sun and Moon

This module provides the shared coordinate math and the solar ephemeris:
- Ecliptic to equatorial conversion
- Azimuth and altitude for an observer
- Local sidereal time
- Solar mean anomaly, ecliptic longitude and equatorial coordinates
- Sun position in the sky

Sun calculations are based on the formulas at http://aa.quae.nl/en/reken/zonpositie.html.
All angles are in radians unless stated otherwise.
"""

import math
from decimal import Decimal
from typing import Tuple

import logging

from sunmoon_julian import JulianDate, Instant, DAY_SEC, to_days

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

_PI = Decimal('3.14159265358979323846264338327950288419716939937510')


def degrees_to_radians(value: str) -> float:
    """Degrees to radians, multiplied at full precision before rounding to float"""
    return float(Decimal(value) * _PI / 180)


RAD = degrees_to_radians('1')
OBLIQUITY = degrees_to_radians('23.4397')     # obliquity of the Earth
PERIHELION = degrees_to_radians('102.9372')   # perihelion of the Earth
TWO_PI = 2 * math.pi

FULL_CIRCLE_NANO = 360 * 10**9

# Sidereal time 280.16 + 360.9856235 * d degrees, scaled by 1e9
ST_COEF0_NANO = 28016 * 10**7
ST_COEF1_NANO = 3609856235 * 100

# Solar mean anomaly 357.5291 + 0.98560028 * d degrees, scaled by 1e9
MA_COEF0_NANO = 3575291 * 10**5
MA_COEF1_NANO = 985600280


# ============================================================================
# Helper Functions
# ============================================================================

def asin(x: float) -> float:
    """Arc sine, nan outside [-1, 1]"""
    if not -1.0 <= x <= 1.0:
        return math.nan
    return math.asin(x)


def acos(x: float) -> float:
    """Arc cosine, nan outside [-1, 1]"""
    if not -1.0 <= x <= 1.0:
        return math.nan
    return math.acos(x)


def _truncated_mod(a: int, b: int) -> int:
    # remainder takes the sign of the dividend
    r = abs(a) % b
    return -r if a < 0 else r


def _periodic_angle(d: JulianDate, coef0: int, coef1: int) -> float:
    """
    Evaluate coef0 + coef1 * d (degrees scaled by 1e9) as an angle.

    The whole days are accumulated in integers and reduced modulo 360 degrees
    before the fraction of the day is added in floating point.
    """
    i = _truncated_mod(coef0 + d.julian_day_number * coef1, FULL_CIRCLE_NANO)
    return RAD * (float(i) / 1e9 + float(d.time) / DAY_SEC * (coef1 / 1e18))


# ============================================================================
# Coordinate Transformation Functions
# ============================================================================

def right_ascension(l: float, b: float) -> float:
    """
    Right ascension from ecliptic coordinates.

    Args:
        l: Ecliptic longitude
        b: Ecliptic latitude

    Returns:
        Right ascension in radians
    """
    return math.atan2(math.sin(l) * math.cos(OBLIQUITY) - math.tan(b) * math.sin(OBLIQUITY),
                      math.cos(l))


def declination(l: float, b: float) -> float:
    """
    Declination from ecliptic coordinates.

    Args:
        l: Ecliptic longitude
        b: Ecliptic latitude

    Returns:
        Declination in radians
    """
    return asin(math.sin(b) * math.cos(OBLIQUITY) +
                math.cos(b) * math.sin(OBLIQUITY) * math.sin(l))


def azimuth(h: float, phi: float, dec: float) -> float:
    """
    Azimuth measured from south, westward positive.

    Args:
        h: Hour angle
        phi: Observer latitude
        dec: Declination

    Returns:
        Azimuth in radians, in (-pi, pi]
    """
    return math.atan2(math.sin(h), math.cos(h) * math.sin(phi) - math.tan(dec) * math.cos(phi))


def altitude(h: float, phi: float, dec: float) -> float:
    """Altitude above the horizon in radians"""
    return asin(math.sin(phi) * math.sin(dec) + math.cos(phi) * math.cos(dec) * math.cos(h))


def sidereal_time(d: JulianDate, lw: float) -> float:
    """
    Calculate Local Sidereal Time.

    Args:
        d: Julian date relative to J2000
        lw: Observer longitude in radians, west positive

    Returns:
        LST in radians
    """
    st = _periodic_angle(d, ST_COEF0_NANO, ST_COEF1_NANO) - lw
    if st < 0:
        st = st + TWO_PI
    return st


# ============================================================================
# Sun Calculations
# ============================================================================

def solar_mean_anomaly(d: JulianDate) -> float:
    """Mean anomaly of the Sun for a Julian date relative to J2000"""
    ma = _periodic_angle(d, MA_COEF0_NANO, MA_COEF1_NANO)
    if ma < 0:
        ma = ma + TWO_PI
    return ma


def ecliptic_longitude(m: float) -> float:
    """
    Ecliptic longitude of the Sun.

    Args:
        m: Solar mean anomaly

    Returns:
        Ecliptic longitude in radians
    """
    # Equation of center
    c = RAD * (1.9148 * math.sin(m) + 0.02 * math.sin(2 * m) + 0.0003 * math.sin(3 * m))

    return m + c + PERIHELION + math.pi


def sun_coordinates(d: JulianDate) -> Tuple[float, float]:
    """
    Calculate the equatorial coordinates of the Sun.

    Args:
        d: Julian date relative to J2000

    Returns:
        Tuple of (declination, right ascension) in radians
    """
    m = solar_mean_anomaly(d)
    l = ecliptic_longitude(m)

    return declination(l, 0), right_ascension(l, 0)


def sun_position(instant: Instant, lat: float, lng: float) -> Tuple[float, float]:
    """
    Calculate sun position for a given instant and location.

    Args:
        instant: Absolute instant
        lat: Observer latitude in degrees
        lng: Observer longitude in degrees (east positive)

    Returns:
        Tuple of (azimuth, altitude) in radians
    """
    lw = RAD * -lng
    phi = RAD * lat
    d = to_days(instant)

    dec, ra = sun_coordinates(d)
    h = sidereal_time(d, lw) - ra

    return azimuth(h, phi, dec), altitude(h, phi, dec)
