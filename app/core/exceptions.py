"""
Domain error taxonomy for the permissions and membership core.

Services raise these instead of HTTPException so that they can be used outside
a request. main.py maps each one to an HTTP status code.

Note: a denied permission check is NOT an error. PermissionService returns False;
Denied is only raised by route guards that turn that False into a 403.
"""


class AccessError(Exception):
    """Base exception for all permission/membership errors."""

    status_code = 500
    default_message = "Access error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AccessError):
    """Raised when the caller has no valid identity."""

    status_code = 401
    default_message = "Authentication required"


class Denied(AccessError):
    """Raised by route guards when a permission check returned False."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AccessError):
    """Raised when a referenced plan, role, action, project, member or invitation does not exist."""

    status_code = 404
    default_message = "Not found"


class Expired(AccessError):
    """Raised when an invitation token is past its deadline."""

    status_code = 410
    default_message = "Invitation has expired"


class Conflict(AccessError):
    """
    Raised when a write would break a domain invariant.

    e.g. removing or demoting the last OWNER of a project.
    """

    status_code = 409
    default_message = "Conflict"
