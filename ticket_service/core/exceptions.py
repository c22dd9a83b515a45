"""
Core Exceptions
================

Custom exceptions for the ticket service.

These exceptions are raised by the repository and data source layers and
translated into HTTP responses at the application boundary.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for malformed filters and rejected payloads."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class DataSourceException(ApplicationException):
    """Exception when the backing store is unavailable or not connected."""

    def __init__(
        self,
        data_source: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.data_source = data_source
        super().__init__(f"Data source '{data_source}': {message}", details)
