"""
Sun and Moon Calculator

This module is the public entry point of the sun and moon calculations:
- Julian dates (JulianDate, to_days)
- Sun position and sun times (SunCalculator)
- Moon position and illumination

All instants are absolute UTC points in time; results are numpy datetime64
values with nanosecond resolution. Angles are returned in radians.

Python Version: 3.8+
"""

import logging
from datetime import datetime, timezone

from sunmoon_julian import JulianDate, to_days, NOT_A_TIME
from sunmoon_astro import sun_position
from sunmoon_times import Config, SunCalculator, SunTimeDefinition
from sunmoon_moon import get_moon_illumination, get_moon_position, moon_phase_name

__version__ = "1.0.0"

__all__ = [
    "JulianDate",
    "to_days",
    "NOT_A_TIME",
    "Config",
    "SunCalculator",
    "SunTimeDefinition",
    "new_sun_calculator",
    "sun_position",
    "get_moon_position",
    "get_moon_illumination",
    "moon_phase_name",
]

logger = logging.getLogger(__name__)


def new_sun_calculator() -> SunCalculator:
    """Return a SunCalculator seeded with the standard sun times"""
    return SunCalculator()


# ============================================================================
# Example Usage
# ============================================================================

if __name__ == "__main__":
    import math

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Jerusalem
    latitude = 31.783
    longitude = 35.233
    now = datetime.now(timezone.utc)

    jd = JulianDate.from_instant(now)
    day, nanos = jd.day_time()
    logger.info(f"Julian day {day}, {nanos / 1e9:.3f} s since noon")

    sun_calc = new_sun_calculator()
    azim, alti = sun_calc.get_position(now, latitude, longitude)
    print(f"Sun  - Azimuth: {math.degrees(azim):8.3f}°, Altitude: {math.degrees(alti):7.3f}°")

    print("\nSun times (UT):")
    times = sun_calc.get_times(now, latitude, longitude)
    for name, t in sorted(times.items(), key=lambda item: item[1]):
        print(f"  {name:15s} {t}")

    azim, alti, dist = get_moon_position(now, latitude, longitude)
    print(f"\nMoon - Azimuth: {math.degrees(azim):8.3f}°, Altitude: {math.degrees(alti):7.3f}°, "
          f"Distance: {dist:.0f} km")

    fraction, phase, angle = get_moon_illumination(now)
    print(f"Moon - Illumination: {fraction:.1%}, Phase: {phase:.3f} ({moon_phase_name(phase)})")
