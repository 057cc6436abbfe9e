"""Domain exceptions.

All domain-level errors that represent business rule violations or
failed calls to the collaborators the catalog depends on. Each class
carries the HTTP status the API layer answers with.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API boundary.
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationFailure(DomainError):
    """Raised when a payload is malformed or misses required fields."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class ShapeMismatch(ValidationFailure):
    """Raised when a payload does not have the shape its schema declares."""

    error_code = "SHAPE_MISMATCH"


class InvalidEnum(ValidationFailure):
    """Raised when a value is not one of the recognized literals."""

    error_code = "INVALID_ENUM"

    def __init__(self, field: str, value: Any, allowed: list[str]) -> None:
        """Initialize invalid enum error.

        Args:
            field: Name of the offending field.
            value: The rejected value.
            allowed: Values that would have been accepted.
        """
        super().__init__(
            f"{value} is invalid attribute for {field}",
            details={"field": field, "value": value, "allowed": allowed},
        )


class InvalidOptions(ValidationFailure):
    """Raised when an availableOptions collection is malformed."""

    error_code = "INVALID_OPTIONS"


class InvalidDefault(ValidationFailure):
    """Raised when an attribute default is not one of its options."""

    error_code = "INVALID_DEFAULT"

    def __init__(self, attribute: str, default: Any, options: list[str]) -> None:
        """Initialize invalid default error.

        Args:
            attribute: Attribute name.
            default: The rejected default value.
            options: The attribute's available options.
        """
        super().__init__(
            f"Default value {default!r} of attribute '{attribute}' "
            f"is not one of {options}",
            details={"attribute": attribute, "default": default, "options": options},
        )


# ============================================================================
# Lookup / Access Errors
# ============================================================================


class NotFound(DomainError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str) -> None:
        """Initialize not found error.

        Args:
            entity_type: Type of entity (e.g., "Product").
            entity_id: Identifier that was looked up.
        """
        super().__init__(
            f"{entity_type} not found",
            details={"entity_type": entity_type, "entity_id": entity_id},
        )


class Unauthorized(DomainError):
    """Raised when a request carries no valid credentials."""

    status_code = 401
    error_code = "UNAUTHORIZED"


class Forbidden(DomainError):
    """Raised when the caller's role or tenant does not permit the operation."""

    status_code = 403
    error_code = "FORBIDDEN"


# ============================================================================
# Collaborator Errors
# ============================================================================


class UpstreamFailure(DomainError):
    """Raised when the database, object store or broker call fails."""

    status_code = 500
    error_code = "UPSTREAM_FAILURE"


class ConfigurationError(DomainError):
    """Raised when required configuration is absent."""

    status_code = 500
    error_code = "CONFIGURATION_ERROR"
