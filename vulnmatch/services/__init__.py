"""Service layer — business logic orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class NotFoundError(ServiceError):
    """Resource not found."""


class ValidationError(ServiceError):
    """Invalid caller input (e.g. malformed pagination arguments)."""
