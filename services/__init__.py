"""
services - Storage collaborators used by the import engine.
"""

from services.container_service import ContainerService, StagedFile  # noqa: F401
from services.job_service import JobService                          # noqa: F401
