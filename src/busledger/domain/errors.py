"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def entity_not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing entity."""
    return f"{kind} {entity_id} not found"


def unknown_collection(name: str) -> str:
    """Return message for an unknown remote collection name."""
    return f"Unknown collection '{name}'"
