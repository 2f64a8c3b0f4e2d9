"""Ownership checks for posts and comments.

Learn: Existence is checked before ownership, so a missing id is always
404 no matter who asks, and 403 is only ever returned for a resource
that really exists. Reads never go through here.
"""

from typing import Optional, Protocol, TypeVar

import structlog

from inkwell.auth.dependencies import CurrentIdentity
from inkwell.errors import Forbidden, NotFound

logger = structlog.get_logger()


class OwnedResource(Protocol):
    id: int
    user_id: int


ResourceT = TypeVar("ResourceT", bound=OwnedResource)


def ensure_exists(
    resource: Optional[ResourceT], kind: str, resource_id: int
) -> ResourceT:
    """Raise NotFound if the lookup came back empty."""
    if resource is None:
        raise NotFound(f"{kind.capitalize()} not found with ID: {resource_id}")
    return resource


def authorize_owner(
    identity: CurrentIdentity,
    resource: Optional[ResourceT],
    kind: str,
    resource_id: int,
) -> ResourceT:
    """Return the resource if it exists and belongs to identity.

    Raises NotFound first, then Forbidden.
    """
    resource = ensure_exists(resource, kind, resource_id)
    if resource.user_id != identity.user_id:
        logger.warning(
            "auth.ownership_denied",
            kind=kind,
            resource_id=resource.id,
            owner_id=resource.user_id,
            user_id=identity.user_id,
        )
        raise Forbidden(f"Permission denied: You are not the author of this {kind}")
    return resource
