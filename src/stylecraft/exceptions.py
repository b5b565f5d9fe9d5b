"""Custom exception hierarchy for stylecraft."""


class StylecraftError(Exception):
    """Base exception for all stylecraft errors."""


class DimensionMismatchError(StylecraftError, ValueError):
    """Raised when vectors of different dimensionality are compared or stored together."""


class StoreError(StylecraftError):
    """Raised on embedding store failures (DB connection, corrupt rows, etc.)."""


class ProviderError(StylecraftError):
    """Raised when an embedding provider cannot be constructed or returns bad output."""


class IngestionError(StylecraftError):
    """Base exception for ingestion pipeline failures."""


class UnknownSourceError(IngestionError):
    """Raised when an ingestion source selector is not recognised."""


class SourceUnavailableError(IngestionError):
    """Raised when a live ingestion source (git clone, local checkout) cannot be read."""


class TableError(StylecraftError):
    """Raised when the industry/mood style tables are malformed."""


class ConfigError(StylecraftError):
    """Raised when configuration values cannot be parsed."""
