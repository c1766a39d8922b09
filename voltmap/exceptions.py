"""
exceptions.py — domain exceptions raised by store.py and the auth layer.

main.py registers one handler for VoltMapError that turns any subclass into
the standard {error: {code, message, details}} envelope using the class's
status_code and code. Routes raise HTTPException for request-level 404/403 checks.
"""


class VoltMapError(Exception):
    """Base class for every expected, client-visible failure."""

    status_code: int = 400
    code: str = "BAD_REQUEST"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class DomainError(VoltMapError):
    """A business rule rejected the request (insufficient points, duplicate favorite, ...)."""


class NotFoundError(VoltMapError):
    status_code = 404
    code = "NOT_FOUND"


class AuthenticationError(VoltMapError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)
