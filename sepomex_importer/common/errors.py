"""Domain errors and failure typing."""


class ImporterError(Exception):
    """Base class for import pipeline failures."""

    error_code = "IMPORTER_ERROR"


class ConfigError(ImporterError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class SourceUnavailable(ImporterError):
    """Raised when the source file is missing or unreadable."""

    error_code = "SOURCE_UNAVAILABLE"


class MalformedRecord(ImporterError):
    """Raised when a data line does not decode into a full record."""

    error_code = "MALFORMED_RECORD"

    def __init__(self, message: str, *, line_number: int, field_count: int) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.field_count = field_count


class StoreError(ImporterError):
    """Raised for any failure reported by the target store."""

    error_code = "STORE_ERROR"
