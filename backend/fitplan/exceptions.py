class StoreError(Exception):
    """Any failure raised by the persistence layer."""


class ConflictError(StoreError):
    """Username or email already taken."""


class NotFoundError(StoreError):
    pass


class AuthenticationError(Exception):
    """Bad credentials, or a missing/expired session."""


class GenerationError(Exception):
    """The plan model failed or returned nothing usable."""
