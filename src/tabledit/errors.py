class TableditError(Exception):
    """Base class for errors raised outside the core."""


class DocumentNotFound(TableditError):
    pass


class ExportError(TableditError):
    """The export collaborator failed; no session state was changed."""
