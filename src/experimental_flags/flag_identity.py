"""
Deterministic identifiers for experimental flags.

Every flag gets a name-based UUID (RFC 4122 version 5) derived from the scope
that declares it and its declared name. The scope itself is first mapped to a
namespace UUID seeded from a single fixed root, so flags with identical names in
different scopes never share an identifier.
"""

import uuid
from uuid import UUID

NAMESPACE_ID = UUID("c68012b3-d666-4204-84eb-4976f2b570ab")


def namespace_id_for(scope: str) -> UUID:
    """Get the namespace UUID for a declaring scope."""
    if not scope:
        raise ValueError("Scope must be a non-empty string")
    return uuid.uuid5(NAMESPACE_ID, scope)


def create_flag_id(namespace_id: UUID, name: str) -> UUID:
    """
    Create a flag identifier inside a namespace.

    Args:
        namespace_id: Namespace UUID, usually from namespace_id_for()
        name: Declared flag name, case preserved

    Returns:
        UUID: The same value for the same inputs on every run
    """
    if not name:
        raise ValueError("Flag name must be a non-empty string")
    return uuid.uuid5(namespace_id, name)


def flag_id_for(scope: str, name: str) -> UUID:
    """Derive the identifier of flag ``name`` declared in ``scope``."""
    return create_flag_id(namespace_id_for(scope), name)
