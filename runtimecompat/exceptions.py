"""Custom exceptions for runtimecompat."""


class CompatError(Exception):
    """Base exception for runtimecompat errors."""
    pass


class TreeParseError(CompatError):
    """Raised when an API tree contains a value that is neither an object nor a type tag."""
    def __init__(self, message: str, path: tuple = ()):
        location = ".".join(path) or "<root>"
        super().__init__(f"{message} (at {location})")
        self.message = message
        self.path = path


class EmptyBaselineError(CompatError):
    """Raised when the baseline tree is empty or has no leaves."""
    def __init__(self, message: str = "Baseline tree is empty"):
        super().__init__(message)
        self.message = message


class ConfigError(CompatError):
    """Raised when the report configuration is invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidJSONError(CompatError):
    """Raised when a dump, version list or version map is not valid JSON."""
    def __init__(self, path, reason: str):
        super().__init__(f"Invalid JSON in {path}: {reason}")
        self.path = path
        self.reason = reason
