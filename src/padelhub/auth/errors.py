"""Access errors — the denial taxonomy shared by the authority and the API.

Learn: Every denial is a typed exception carrying a stable reason code.
The HTTP boundary maps the class to a status code and passes the code
through verbatim, so clients can tell "log in" from "you are not a coach"
from "no such player" without parsing messages.
"""

from typing import Optional


class AccessError(Exception):
    """Base class for all access denials."""

    status_code: int = 400
    code: str = "access_denied"

    def __init__(self, detail: str, code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"detail": self.detail, "code": self.code}


class Unauthenticated(AccessError):
    """No identity on the request."""

    status_code = 401
    code = "unauthenticated"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)


class Forbidden(AccessError):
    """Identity known, but role or ownership is insufficient."""

    status_code = 403
    code = "forbidden"

    def __init__(
        self,
        detail: str,
        role_required: Optional[str] = None,
        code: Optional[str] = None,
    ):
        super().__init__(detail, code)
        self.role_required = role_required

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.role_required:
            body["role_required"] = self.role_required
        return body


class NotFound(AccessError):
    """Target does not exist, or is outside the caller's scope."""

    status_code = 404
    code = "not_found"

    def __init__(self, resource_kind: str, detail: Optional[str] = None,
                 code: Optional[str] = None):
        super().__init__(detail or f"{resource_kind.capitalize()} not found", code)
        self.resource_kind = resource_kind

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["resource"] = self.resource_kind
        return body


class ValidationFailed(AccessError):
    """Input the authority cannot act on (missing email, self-link)."""

    status_code = 400
    code = "validation_failed"

    def __init__(self, field: str, detail: str, code: Optional[str] = None):
        super().__init__(detail, code)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["field"] = self.field
        return body
