"""
placements/exceptions.py
────────────────────────
Errors raised by placements.services and turned into notifications by the
views.
"""


class RegistrationError(Exception):
    """The registration could not be written."""


class NotAuthenticated(RegistrationError):
    """No signed-in account to attach the registration to."""


class AlreadyRegistered(RegistrationError):
    """The database rejected a second registration for the same student."""


class SelectionUnavailable(RegistrationError):
    """The chosen subject is full or the school's GPA gate is not met."""


class StudentRecordConflict(RegistrationError):
    """The verified student ID is already linked to a different account."""
