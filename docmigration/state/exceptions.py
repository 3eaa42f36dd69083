class StateError(Exception):
    """Base exception for saving and loading registry state."""


class StateFormatError(StateError):
    """Raised when a state file cannot be decoded as a whole."""
