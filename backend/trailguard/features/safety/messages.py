"""
Emergency alert text formatters.

Formats alert data into human-readable messages for emergency contacts.

Alert types:
- fall: acceleration spike
- no_movement: no displacement within the no-movement window
- off_trail: too far from the planned route
- low_battery: device battery at or below the threshold
- manual: hiker pressed the emergency button
"""

from typing import Optional

from trailguard.features.recording.models import GPSFix
from trailguard.shared.constants import AlertType

LOCATION_UNAVAILABLE = "Location unavailable"


def format_location(location: Optional[GPSFix]) -> str:
    """Format coordinates with 6 decimals, or a placeholder."""
    if location is None:
        return LOCATION_UNAVAILABLE
    return f"Lat: {location.latitude:.6f}, Lng: {location.longitude:.6f}"


def format_alert_message(
    alert_type: AlertType,
    location: Optional[GPSFix] = None,
    battery_level: Optional[float] = None,
    no_movement_minutes: float = 30,
) -> str:
    """
    Format alert message for emergency contacts.

    Args:
        alert_type: Type of alert
        location: Last known position
        battery_level: Battery percent, if known
        no_movement_minutes: Window used by the no-movement check

    Returns:
        Message text
    """
    where = format_location(location)

    if alert_type == AlertType.FALL:
        return (
            f"EMERGENCY: Potential fall detected for hiker. Location: {where}. "
            "Please check on them immediately."
        )
    if alert_type == AlertType.NO_MOVEMENT:
        return (
            f"EMERGENCY: No movement detected for {no_movement_minutes:g}+ minutes. "
            f"Location: {where}. Please check on them."
        )
    if alert_type == AlertType.OFF_TRAIL:
        return (
            f"EMERGENCY: Hiker has gone significantly off-trail. Location: {where}. "
            "Please check on them."
        )
    if alert_type == AlertType.LOW_BATTERY:
        level = f"{battery_level:.0f}%" if battery_level is not None else "unknown"
        return (
            f"WARNING: Hiker's device battery is critically low ({level}). "
            f"Last location: {where}."
        )
    if alert_type == AlertType.MANUAL:
        return (
            f"EMERGENCY: Manual emergency alert triggered. Location: {where}. "
            "Please provide assistance."
        )
    return "Emergency alert triggered"
