"""
Formatting utilities for display.

Used by the recording routes to fill the `display` block of responses.
"""

from .constants import DistanceUnit, SpeedUnit, METERS_PER_MILE


def format_distance(meters: float, unit: DistanceUnit = DistanceUnit.KILOMETERS) -> str:
    """
    Format distance.

    Args:
        meters: Distance in meters
        unit: Target unit

    Returns:
        Formatted string (e.g., '12.50 km', '850 m', '1.20 mi')
    """
    if unit == DistanceUnit.METERS:
        return f"{int(round(meters))} m"
    if unit == DistanceUnit.MILES:
        return f"{meters / METERS_PER_MILE:.2f} mi"
    if meters < 1000:
        return f"{int(round(meters))} m"
    return f"{meters / 1000:.2f} km"


def format_duration(seconds: float) -> str:
    """
    Format duration as 'H:MM:SS' or 'M:SS'.

    Args:
        seconds: Duration in seconds

    Returns:
        Formatted string (e.g., '1:05:09', '4:07')
    """
    if seconds < 0:
        return "—"

    total = int(seconds)
    h = total // 3600
    m = (total % 3600) // 60
    s = total % 60

    if h > 0:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_speed(mps: float, unit: SpeedUnit = SpeedUnit.KMH) -> str:
    """
    Format speed.

    Args:
        mps: Speed in meters per second
        unit: Target unit

    Returns:
        Formatted string (e.g., '4.3 km/h')
    """
    if unit == SpeedUnit.MPS:
        return f"{mps:.1f} m/s"
    if unit == SpeedUnit.MPH:
        return f"{mps * 3600 / METERS_PER_MILE:.1f} mph"
    return f"{mps * 3.6:.1f} km/h"
