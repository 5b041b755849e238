"""
Custom exceptions for the encoding pipeline.

This module defines the error taxonomy surfaced by snapshot construction,
encoding operations, configuration assembly and export.
"""


class EncodingException(Exception):
    """Base exception for all graph encoding errors."""
    pass


class GraphReferenceError(EncodingException):
    """Raised when an element references a node or edge id that does not exist."""
    def __init__(self, element_id, message: str = None):
        self.element_id = element_id
        super().__init__(message or f"Unknown graph element '{element_id}'")


class ConfigurationError(EncodingException):
    """Raised when an attribute, option or coordinate cannot be encoded."""
    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f"Invalid configuration for '{field}'")


class ExportError(EncodingException):
    """Raised when a configuration cannot be written to its destination."""
    def __init__(self, destination: str, message: str = None):
        self.destination = destination
        super().__init__(message or f"Failed to export visualization to '{destination}'")
