"""
exceptions.py - Custom Exception Classes

Defines application-specific exceptions for better error handling and logging.

Usage:
    from crack_monitor.exceptions import BuildingFetchError

    raise BuildingFetchError("Building list request failed")
"""


class CrackMonitorError(Exception):
    """Base exception for all crack monitoring dashboard errors."""
    pass


class BuildingFetchError(CrackMonitorError):
    """Raised when the building list cannot be fetched from the API."""
    pass


class ElevationLookupError(CrackMonitorError):
    """Raised when the upstream elevation service cannot be reached."""
    pass


class ConfigurationError(CrackMonitorError):
    """Raised when configuration is invalid."""
    pass
