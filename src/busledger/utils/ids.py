"""Identifier generation."""

from uuid import uuid4


def new_id() -> str:
    """Return a new opaque entity identifier."""
    return uuid4().hex
