"""Resolve CLI arguments given as an ID or a name."""

from typing import Callable, Sequence, TypeVar

from famfin.domain.errors import NotFoundError

T = TypeVar("T")


def resolve_entity(
    items: Sequence[T],
    identifier: str,
    kind: str,
    accept: Callable[[T], bool] = lambda item: True,
) -> T:
    """Find an entity by exact ID, falling back to a case-insensitive name.

    Args:
        items: Candidates, each with ``id`` and ``name`` attributes
        identifier: ID or name typed by the user
        kind: Entity label used in the error message
        accept: Extra filter for name matches (e.g. only expense methods)

    Returns:
        The matching entity

    Raises:
        NotFoundError: If nothing matches
    """
    for item in items:
        if item.id == identifier:
            return item

    wanted = identifier.strip().lower()
    matches = [item for item in items if item.name.lower() == wanted]
    preferred = [item for item in matches if accept(item)]
    if preferred:
        return preferred[0]
    if matches:
        return matches[0]
    raise NotFoundError(f"{kind} '{identifier}' not found")
