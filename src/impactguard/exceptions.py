"""Custom exceptions for ImpactGuard."""


class ImpactGuardError(Exception):
    """Base exception for all ImpactGuard errors."""


class ConfigError(ImpactGuardError):
    """Configuration-related errors."""


class DiffSourceError(ImpactGuardError):
    """Diff retrieval errors."""


class FixError(ImpactGuardError):
    """Auto-fix application errors."""

    def __init__(self, file: str, message: str):
        super().__init__(f"Cannot apply fix to '{file}': {message}")
        self.file = file
