"""
BulkImport - Centralised configuration.

All tunables live here.  Every other module imports from config
instead of reading os.environ directly.
"""

from __future__ import annotations
import os
from pathlib import Path

import dotenv

# ── Paths ──────────────────────────────────────────────────────────────
BASE_DIR     = Path(__file__).resolve().parent

dotenv.load_dotenv(BASE_DIR / ".env")

STORAGE_ROOT = Path(os.environ.get("BULKIMPORT_STORAGE_ROOT", BASE_DIR / "storage"))

# ── Database ───────────────────────────────────────────────────────────
DB_URL = os.environ.get("BULKIMPORT_DB", f"sqlite:///{BASE_DIR / 'bulkimport.sqlite'}")

# ── Import engine ──────────────────────────────────────────────────────
ACCEPTED_CONTENT_TYPE = os.environ.get("BULKIMPORT_CONTENT_TYPE", "text/csv")

# Collaborator names carried in the worker payload
CONTAINER_STORE = os.environ.get("BULKIMPORT_CONTAINER_STORE", "ImportContainer")
JOB_LOG         = os.environ.get("BULKIMPORT_JOB_LOG", "ImportLog")

CLEANUP_CONTAINER = os.environ.get("BULKIMPORT_CLEANUP_CONTAINER", "0") == "1"
RELATION_WORKERS  = int(os.environ.get("BULKIMPORT_RELATION_WORKERS", "8"))

# ── Celery ─────────────────────────────────────────────────────────────
CELERY_BROKER_URL = os.environ.get("BULKIMPORT_BROKER_URL", "")

# celery | process | inline.  Without a broker Celery would run tasks
# eagerly inside the request, so runs go to a spawned process instead;
# "inline" and an explicit "celery" without broker are for tests only.
DISPATCH = os.environ.get("BULKIMPORT_DISPATCH",
                          "celery" if CELERY_BROKER_URL else "process")

# ── Server ─────────────────────────────────────────────────────────────
HOST      = os.environ.get("BULKIMPORT_HOST", "0.0.0.0")
PORT      = int(os.environ.get("BULKIMPORT_PORT", "5000"))
DEBUG     = os.environ.get("BULKIMPORT_DEBUG", "0") == "1"
SECRET    = os.environ.get("BULKIMPORT_SECRET", "bulkimport-dev-key-change-in-prod")
LOG_LEVEL = os.environ.get("BULKIMPORT_LOG_LEVEL", "INFO")
