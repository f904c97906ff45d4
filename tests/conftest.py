import csv
from datetime import datetime, timezone

import pytest

import config
from db import init_db, dispose_db, get_session
from db.models import JobStatus
from import_engine.context import RunParameters
from services.container_service import ContainerService
from services.job_service import JobService
from tests import factories


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch):
    """Fresh SQLite file per test; the engine needs a file for threaded sessions."""
    url = f"sqlite:///{tmp_path / 'test.sqlite'}"
    monkeypatch.setattr(config, "DB_URL", url)
    init_db(url)
    yield url
    dispose_db()


@pytest.fixture(autouse=True)
def storage(tmp_path, monkeypatch):
    """Temporary storage root and synchronous dispatch."""
    root = tmp_path / "storage"
    root.mkdir()
    monkeypatch.setattr(config, "STORAGE_ROOT", root)
    monkeypatch.setattr(config, "DISPATCH", "inline")
    monkeypatch.setattr(config, "CLEANUP_CONTAINER", False)
    return root


@pytest.fixture
def session(database):
    s = get_session()
    factories.bind(s)
    yield s
    s.close()


@pytest.fixture
def stage_csv(storage):
    """
    Write rows into a container and create a PENDING job for them.
    Returns the RunParameters a launcher would hand to the worker.
    """
    counter = {"n": 0}

    def _stage(rows, header=None, scope="Part"):
        counter["n"] += 1
        container = f"{scope}-test-{counter['n']}"
        ContainerService(storage).create_container(container)
        path = storage / container / "import.csv"
        header = header or list(rows[0].keys())
        with open(path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=header)
            writer.writeheader()
            writer.writerows(rows)

        s = get_session()
        try:
            job = JobService.create(
                s,
                date=datetime.now(timezone.utc),
                target_type=scope,
                status=JobStatus.PENDING,
                container=container,
                file_name="import.csv",
            )
            job_id = job.id
        finally:
            s.close()

        return RunParameters(
            scope=scope,
            job_id=job_id,
            root=str(storage),
            container=container,
            file="import.csv",
        )

    return _stage


@pytest.fixture
def load_job():
    def _load(job_id):
        s = get_session()
        try:
            return JobService.find_by_id(s, job_id).to_dict()
        finally:
            s.close()
    return _load
