"""
Elevation processing utilities.

This is the SINGLE SOURCE OF TRUTH for elevation calculations.
"""
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from trailguard.features.recording.models import GPSFix


def elevation_delta(a: "GPSFix", b: "GPSFix") -> float:
    """
    Altitude change from a to b in meters.

    A step where either fix has no altitude counts as flat.
    """
    if a.altitude is None or b.altitude is None:
        return 0.0
    return b.altitude - a.altitude


def calculate_elevation_changes(
    fixes: Sequence["GPSFix"]
) -> tuple[float, float]:
    """
    Calculate total elevation gain and loss.

    Args:
        fixes: Fixes in temporal order

    Returns:
        Tuple of (gain_m, loss_m), both non-negative
    """
    gain = 0.0
    loss = 0.0

    for i in range(1, len(fixes)):
        diff = elevation_delta(fixes[i - 1], fixes[i])
        if diff > 0:
            gain += diff
        else:
            loss += abs(diff)

    return gain, loss


def elevation_gain(fixes: Sequence["GPSFix"]) -> float:
    """Cumulative climb in meters."""
    return calculate_elevation_changes(fixes)[0]


def elevation_loss(fixes: Sequence["GPSFix"]) -> float:
    """Cumulative descent in meters (positive number)."""
    return calculate_elevation_changes(fixes)[1]
