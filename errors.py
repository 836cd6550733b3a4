"""
Error kinds raised by the catalog core.

Every error carries the HTTP status it maps to and a list of
human-readable messages, so the web layer can render them as-is.
"""


class CatalogError(Exception):
    """Base class for errors the caller can see."""

    status_code = 400

    def __init__(self, messages):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class ValidationError(CatalogError):
    """One or more payload fields break a structural rule."""


class DuplicateKey(CatalogError):
    """A natural key (email, category name, ISBN) is already taken."""


class ReferenceNotFound(CatalogError):
    """A book payload points at an author or category that does not exist."""


class HasDependents(CatalogError):
    """Delete blocked because books still reference the row."""


class NotFound(CatalogError):
    status_code = 404


class StoreFailure(CatalogError):
    """Unexpected persistence error. Details go to the log, not the client."""

    status_code = 500
    default_message = "An unexpected error occurred while accessing the catalog."

    def __init__(self, messages=None):
        super().__init__(messages or self.default_message)
