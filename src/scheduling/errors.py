"""Persistence errors raised by review stores."""


class PersistenceError(Exception):
    """Raised when the review store cannot be used."""
    pass


class PersistenceReadError(PersistenceError):
    """Raised when stored review records could not be read."""
    pass


class PersistenceWriteError(PersistenceError):
    """Raised when review records could not be written."""
    pass
