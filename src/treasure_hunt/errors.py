class TreasureHuntError(Exception):
    """Base error for Treasure Hunt domain exceptions."""


class MapInitializationError(TreasureHuntError):
    """Raised when a map description cannot be turned into a valid world.

    The message always carries the human-readable reason (bad field count,
    out-of-bounds entity, overlapping entities, ...).
    """


class SettingsError(TreasureHuntError):
    """Raised when a settings file cannot be read or holds unexpected values."""
