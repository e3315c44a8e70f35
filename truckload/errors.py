from __future__ import annotations


class TruckloadError(Exception):
    """Base class for errors surfaced to the dashboard."""


class ConfigError(TruckloadError):
    pass


class StoreError(TruckloadError):
    """A call to the remote store failed."""


class InvalidRecordError(TruckloadError, ValueError):
    """A row or form payload violates the loading record contract."""
