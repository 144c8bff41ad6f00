"""
Moon Calculation Module

This module provides lunar calculations including:
- Geocentric equatorial coordinates and distance of the Moon
- Moon position in the sky with a refraction correction near the horizon
- Illuminated fraction, phase and bright limb angle

Positions are based on the formulas at http://aa.quae.nl/en/reken/hemelpositie.html,
illumination on mphase.pro from the IDL astronomy library and chapter 48 of
"Astronomical Algorithms" 2nd edition by Jean Meeus (Willmann-Bell, Richmond) 1998.
"""

import math
import numpy as np
from typing import Tuple
import logging

from sunmoon_julian import Instant, JulianDate, to_days
from sunmoon_astro import (
    RAD, acos, altitude, azimuth, declination, degrees_to_radians,
    right_ascension, sidereal_time, sun_coordinates
)

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

SUN_DISTANCE = 149598000  # distance from Earth to Sun in km

LONGITUDE_AMPLITUDE = degrees_to_radians('6.289')
LATITUDE_AMPLITUDE = degrees_to_radians('5.128')

# Refraction h + 0.017 / tan(h + 10.26 / (h + 5.10)), degrees
REFRACTION_SCALE = degrees_to_radians('0.017')
REFRACTION_NUMERATOR = degrees_to_radians('10.26')
REFRACTION_OFFSET = degrees_to_radians('5.10')

PHASE_NAMES = (
    'New Moon',
    'Waxing Crescent',
    'First Quarter',
    'Waxing Gibbous',
    'Full Moon',
    'Waning Gibbous',
    'Last Quarter',
    'Waning Crescent',
)


# ============================================================================
# Moon Position
# ============================================================================

def moon_coordinates(jd: JulianDate) -> Tuple[float, float, float]:
    """
    Calculate geocentric coordinates of the Moon.

    Args:
        jd: Julian date relative to J2000

    Returns:
        Tuple of (declination, right ascension, distance) in radians and km
    """
    d = jd.fractional_days()

    L = RAD * (218.316 + 13.176396 * d)  # ecliptic longitude
    M = RAD * (134.963 + 13.064993 * d)  # mean anomaly
    F = RAD * (93.272 + 13.229350 * d)   # mean distance

    l = L + LONGITUDE_AMPLITUDE * math.sin(M)  # longitude
    b = LATITUDE_AMPLITUDE * math.sin(F)       # latitude
    dist = 385001 - 20905 * math.cos(M)        # distance to the moon in km

    return declination(l, b), right_ascension(l, b), dist


def refraction(h: float) -> float:
    """Altitude correction for atmospheric refraction, h in radians (inf or nan at the poles of the formula)"""
    with np.errstate(divide='ignore', invalid='ignore'):
        z = h + REFRACTION_NUMERATOR / np.float64(h + REFRACTION_OFFSET)
        return float(REFRACTION_SCALE / np.tan(z))


def get_moon_position(instant: Instant, lat: float, lng: float) -> Tuple[float, float, float]:
    """
    Calculate moon position for a given instant and location.

    Args:
        instant: Absolute instant
        lat: Latitude in degrees
        lng: Longitude in degrees (east positive)

    Returns:
        Tuple of (azimuth, altitude, distance); angles in radians, distance in km
    """
    lw = RAD * -lng
    phi = RAD * lat
    d = to_days(instant)

    dec, ra, dist = moon_coordinates(d)
    H = sidereal_time(d, lw) - ra
    h = altitude(H, phi, dec)

    h = h + refraction(h)

    return azimuth(H, phi, dec), h, dist


# ============================================================================
# Moon Illumination
# ============================================================================

def get_moon_illumination(instant: Instant) -> Tuple[float, float, float]:
    """
    Calculate illumination parameters of the Moon.

    Args:
        instant: Absolute instant

    Returns:
        Tuple of (fraction, phase, angle):
            fraction: illuminated fraction, 0.0 at new moon to 1.0 at full moon
            phase: 0.0 new moon, 0.25 first quarter, 0.5 full moon, 0.75 last quarter
            angle: midpoint angle in radians of the illuminated limb reckoned
                   eastward from the north point of the disk; the moon is
                   waxing if negative and waning if positive
    """
    d = to_days(instant)
    s_dec, s_ra = sun_coordinates(d)
    m_dec, m_ra, m_dist = moon_coordinates(d)

    phi = acos(math.sin(s_dec) * math.sin(m_dec) +
               math.cos(s_dec) * math.cos(m_dec) * math.cos(s_ra - m_ra))
    inc = math.atan2(SUN_DISTANCE * math.sin(phi), m_dist - SUN_DISTANCE * math.cos(phi))
    angle = math.atan2(math.cos(s_dec) * math.sin(s_ra - m_ra),
                       math.sin(s_dec) * math.cos(m_dec) -
                       math.cos(s_dec) * math.sin(m_dec) * math.cos(s_ra - m_ra))

    fraction = (1 + math.cos(inc)) / 2
    # a zero angle counts as waning
    sign = -1.0 if angle < 0 else 1.0
    phase = 0.5 + 0.5 * inc * sign / math.pi

    return fraction, phase, angle


def moon_phase_name(phase: float) -> str:
    """
    Name of the moon phase.

    Args:
        phase: Phase value from get_moon_illumination (0-1)

    Returns:
        One of PHASE_NAMES
    """
    index = int(math.floor(phase * 8 + 0.5)) % 8
    return PHASE_NAMES[index]
