"""
Domain errors raised by the services and mapped to HTTP answers by the
endpoints.
"""


class UserNotFoundError(LookupError):
    """The user referenced by the token no longer exists."""


class EmailAlreadyRegisteredError(ValueError):
    """Another account already uses this email."""


class CarNotFoundError(LookupError):
    """No car with this id belongs to the caller."""


class GenerationNotFoundError(ValueError):
    """The referenced generation does not exist."""
