"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.
"""
import math
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from trailguard.features.recording.models import GPSFix

# Earth radius in meters
EARTH_RADIUS_M = 6_371_000.0


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance(a: "GPSFix", b: "GPSFix") -> float:
    """Distance in meters between two fixes."""
    return haversine(a.latitude, a.longitude, b.latitude, b.longitude)


def total_distance(fixes: Sequence["GPSFix"]) -> float:
    """
    Calculate total distance along an ordered sequence of fixes.

    Args:
        fixes: Fixes in temporal order

    Returns:
        Total distance in meters (0 for fewer than two fixes)
    """
    total = 0.0

    for i in range(1, len(fixes)):
        total += distance(fixes[i - 1], fixes[i])

    return total


def average_speed(distance_m: float, duration_s: float) -> float:
    """
    Average speed in m/s.

    Returns 0 when duration is not positive.
    """
    if duration_s <= 0:
        return 0.0
    return distance_m / duration_s


def distance_to_route(
    fix: "GPSFix",
    route: Iterable[tuple[float, float]]
) -> float:
    """
    Distance from a fix to the nearest point of a planned route.

    Args:
        fix: Current position
        route: (lat, lon) points of the planned route

    Returns:
        Distance in meters, or 0 if the route is empty
    """
    nearest = None

    for lat, lon in route:
        d = haversine(fix.latitude, fix.longitude, lat, lon)
        if nearest is None or d < nearest:
            nearest = d

    return nearest if nearest is not None else 0.0
