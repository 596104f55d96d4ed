"""Custom exceptions for MText layout."""

from typing import Optional


class MTextLayoutError(Exception):
    """Base exception for MText layout errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ParsingError(MTextLayoutError):
    """Exception raised when MText input cannot be tokenized."""

    pass


class FontError(MTextLayoutError):
    """Exception raised while loading or describing a font."""

    pass


class ConfigurationError(MTextLayoutError):
    """Exception raised for invalid layout settings."""

    pass


class RenderingError(MTextLayoutError):
    """Exception raised while exporting a layout."""

    pass
