"""Error types raised across the radar package."""


class RadarError(Exception):
    """Base class for radar errors."""


class ConfigError(RadarError):
    """A required setting is missing or invalid. Raised before any I/O."""


class StoreError(RadarError):
    """A storage call failed (network, auth or PostgREST rejection)."""

    def __init__(self, table: str, operation: str, cause: Exception | str):
        self.table = table
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} on '{table}' failed: {cause}")
