#!/usr/bin/env python3
"""
Service exceptions shared by the matching and intake services.

Request handlers map these to user-facing errors; the core never retries
on any of them.
"""


class ServiceException(Exception):
    """Base exception for service layer errors."""
    pass


class ValidationError(ServiceException):
    """Raised when required input is missing or empty, before any external call."""
    pass


class UpstreamModelError(ServiceException):
    """Raised when the embedding or generation provider fails."""
    pass


class PersistenceError(ServiceException):
    """Raised when a record-store read or write fails."""
    pass


class JobNotFoundException(ServiceException):
    """Raised when a job request is not found."""
    pass


class FreelancerProfileNotFoundException(ServiceException):
    """Raised when a freelancer profile is not found."""
    pass


class EmbeddingNotReadyError(ServiceException):
    """Raised when matching is requested for a job without an embedding."""
    pass
