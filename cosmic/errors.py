"""Custom exceptions for the astrology engine."""


class AstroEngineError(Exception):
    """Base exception for all engine errors."""
    pass


class InvalidDateFormat(AstroEngineError):
    """Raised when a date or time string cannot be parsed."""
    pass


class InvalidDateRange(AstroEngineError):
    """Raised when a calendar range is out of bounds or its start is unparseable."""
    pass


class InvalidTimezone(AstroEngineError):
    """Raised when a birth timezone is not a known IANA name."""
    pass


class MissingLocation(AstroEngineError):
    """Raised when required birth location fields are absent."""
    pass


class ChartNotFound(AstroEngineError):
    """Raised when a natal chart is required but has not been stored."""
    pass


class InvalidPhaseName(AstroEngineError):
    """Raised when a lunar phase search target is not recognised."""
    pass


class InvalidLocation(AstroEngineError):
    """Raised when birth location fields are present but malformed or out of range."""
    pass
