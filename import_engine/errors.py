"""
import_engine.errors - Error taxonomy for import runs.

    ImportSetupError   → caller of start_import (no job, or job uncreated)
    ImportRejected     → staged file is not CSV
    RowError           → recorded on the job, run continues
    FatalImportError   → job record unusable, worker must stop loudly
"""


class ImportSetupError(Exception):
    """Unknown import type or missing collaborator."""
    pass


class ImportRejected(ImportSetupError):
    """The staged file's content type is not accepted."""
    pass


class RowError(Exception):
    """Raised when a row cannot be imported."""
    pass


class FatalImportError(Exception):
    """The job record cannot be loaded or persisted."""
    pass
