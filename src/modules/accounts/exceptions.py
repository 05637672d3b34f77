"""Account domain exceptions."""

from __future__ import annotations


class UserNotFound(Exception):
    """The requested user does not exist."""


class UserAlreadyExists(Exception):
    """The username is already taken."""


class CannotDeleteSelf(Exception):
    """An admin tried to delete their own account."""


class UserInUse(Exception):
    """The user is referenced by orders and cannot be removed."""


class InvalidCurrentPassword(Exception):
    """The current password supplied for a password change is wrong."""
