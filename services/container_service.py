"""
services.container_service - Filesystem staging for uploaded import files.

One directory ("container") per import run under a storage root.
The worker process only receives the root, container and file names,
and re-derives the path from them.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, asdict
from pathlib import Path

from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedFile:
    root: str
    container: str
    name: str
    content_type: str

    def to_dict(self) -> dict:
        return asdict(self)


class ContainerService:

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def container_path(self, container: str) -> Path:
        return self.root / container

    def file_path(self, container: str, name: str) -> Path:
        return self.root / container / name

    def create_container(self, container: str) -> Path:
        path = self.container_path(container)
        path.mkdir(parents=True, exist_ok=False)
        return path

    def upload(self, container: str, upload) -> StagedFile:
        """
        Save a werkzeug FileStorage (or anything with .filename,
        .mimetype and .save(path)) into the container.
        """
        name = secure_filename(upload.filename or "") or "upload.csv"
        upload.save(str(self.file_path(container, name)))
        content_type = (getattr(upload, "mimetype", None)
                        or getattr(upload, "content_type", None) or "")
        logger.info("Staged %s in container %s (%s)", name, container, content_type)
        return StagedFile(str(self.root), container, name, content_type)

    def destroy_container(self, container: str) -> None:
        shutil.rmtree(self.container_path(container), ignore_errors=True)
        logger.info("Destroyed container %s", container)
