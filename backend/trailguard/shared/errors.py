"""
Error taxonomy shared by recording, completion and safety features.

Low-confidence fixes are not errors: they are counted and logged by the
recording session. Completion verification never raises.
"""


class TrailGuardError(Exception):
    """Base class for all application errors."""


class ValidationError(TrailGuardError):
    """Invalid caller input (empty trail name, starting an active session)."""


class SessionStateError(ValidationError):
    """Lifecycle action requested in a state that does not allow it."""

    def __init__(self, action: str, state: str):
        self.action = action
        self.state = state
        super().__init__(f"Cannot {action} a recording that is {state}")


class LocationUnavailableError(TrailGuardError):
    """Location provider cannot supply fixes (permission denied, no hardware)."""
