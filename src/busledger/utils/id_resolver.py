"""Utility for resolving entity ids from a unique prefix."""

from typing import Iterable, Any


def resolve_id(items: Iterable[Any], entity_id: str, kind: str) -> str:
    """Resolve a full id or a unique id prefix to the entity's id.

    Args:
        items: Entities carrying an ``id`` attribute
        entity_id: Full id or leading part of one
        kind: Entity kind used in error messages (e.g. "Debt")

    Returns:
        The matching entity id

    Raises:
        NotFoundError: If no entity matches
        ValidationError: If the prefix matches several entities
    """
    # Local import keeps utils importable without the domain package
    from busledger.domain.errors import NotFoundError, ValidationError, entity_not_found

    entity_id = entity_id.strip()
    if not entity_id:
        raise ValidationError(f"{kind} id must not be empty")

    matches = []
    for item in items:
        if item.id == entity_id:
            return item.id
        if item.id.startswith(entity_id):
            matches.append(item.id)

    if not matches:
        raise NotFoundError(entity_not_found(kind, entity_id))
    if len(matches) > 1:
        raise ValidationError(f"{kind} id '{entity_id}' is ambiguous ({len(matches)} matches)")
    return matches[0]
