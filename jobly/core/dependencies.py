"""Dependency injection type aliases."""

from jobly.core.auth import (
    AuthenticatedUser,
    CurrentUser,
    RequireAdmin,
    RequireAdminOrSelf,
    RequireLoggedIn,
)

__all__ = [
    "AuthenticatedUser",
    "CurrentUser",
    "RequireLoggedIn",
    "RequireAdmin",
    "RequireAdminOrSelf",
]
