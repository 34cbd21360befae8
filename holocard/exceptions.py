"""Exception classes for the scheme engine."""


class HolocardError(Exception):
    """Base exception for scheme engine errors."""

    pass


class StorageError(HolocardError):
    """Raised when a storage backend cannot read or write a key."""

    pass


class SchemeImportError(HolocardError):
    """Raised when import text cannot be turned into a scheme.

    ``code`` is one of ``invalid_json``, ``invalid_structure`` or
    ``invalid_scheme``.
    """

    def __init__(self, code: str, message: str | None = None):
        super().__init__(message or code)
        self.code = code
