"""Access-control policy shared by every task and user endpoint.

Authentication (is there a valid caller?) is settled by the API dependency
before any of these checks run, so a bad token always yields 401 and never
403.
"""

from dataclasses import dataclass
from enum import Enum

from sprintsync.services.errors import ForbiddenError


@dataclass(frozen=True)
class Caller:
    """Authenticated identity taken from the session token."""

    user_id: int
    username: str
    is_admin: bool = False


class Operation(str, Enum):
    """Operation classes the policy distinguishes."""

    SELF_OR_ADMIN = "self_or_admin"
    ADMIN_ONLY = "admin_only"


def is_allowed(caller: Caller, owner_id: int | None, operation: Operation) -> bool:
    """Decide whether ``caller`` may perform ``operation`` on a resource.

    Args:
        caller: The authenticated identity
        owner_id: Id of the user owning the resource (None for global resources)
        operation: The operation class being attempted
    """
    if caller.is_admin:
        return True
    if operation is Operation.ADMIN_ONLY:
        return False
    return owner_id is not None and owner_id == caller.user_id


def enforce(
    caller: Caller,
    owner_id: int | None,
    operation: Operation,
    message: str | None = None,
) -> None:
    """Raise ForbiddenError unless the policy allows the operation."""
    if not is_allowed(caller, owner_id, operation):
        if message is None:
            message = (
                "Access denied. Admin privileges required."
                if operation is Operation.ADMIN_ONLY
                else "Access denied"
            )
        raise ForbiddenError(message)
