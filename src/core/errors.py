class StoreError(Exception):
    """A write was rejected by the database (constraint, connection, ...)."""


class ValidationError(ValueError):
    """Form input failed a check before any request was issued."""

    def __init__(self, message, fields=()):
        super().__init__(message)
        self.fields = tuple(fields)


class PermissionDenied(Exception):
    pass


class AuthError(Exception):
    pass
