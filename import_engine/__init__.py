"""
import_engine - CSV bulk-import pipeline.

Public API:
    start_import(type_name, upload) → StagingResult   (request side)
    run_import(params)              → ImportReport    (worker side)
"""

from import_engine.errors import (                                  # noqa: F401
    ImportSetupError, ImportRejected, RowError, FatalImportError,
)
from import_engine.registry import ImportableType, register        # noqa: F401
from import_engine.context import RunParameters                     # noqa: F401
from import_engine.report import ImportReport                       # noqa: F401
from import_engine.importer import run_import                       # noqa: F401
from import_engine.launcher import start_import, StagingResult      # noqa: F401
