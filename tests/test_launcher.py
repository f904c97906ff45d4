import importlib
import io
import json

import pytest
from sqlalchemy import func, select
from werkzeug.datastructures import FileStorage

import config
from db import get_session
from db.models import ImportJob
from import_engine import launcher
from import_engine.errors import ImportRejected, ImportSetupError
from import_engine.launcher import start_import


def _upload(content=b"MPN,Value\nR1,10k\n", content_type="text/csv", name="parts.csv"):
    return FileStorage(stream=io.BytesIO(content), filename=name, content_type=content_type)


def _job_count():
    s = get_session()
    try:
        return s.scalar(select(func.count()).select_from(ImportJob))
    finally:
        s.close()


@pytest.fixture
def dispatched(monkeypatch):
    """Capture the worker payload instead of running it."""
    calls = []
    monkeypatch.setattr(launcher, "dispatch", lambda params, mode=None: calls.append(params))
    return calls


def test_stages_file_and_creates_pending_job(storage, load_job, dispatched):
    result = start_import("Part", _upload())

    job = load_job(result.job_id)
    assert job["status"] == "PENDING"
    assert job["target_type"] == "Part"
    assert (storage / result.file.container / result.file.name).read_bytes() == b"MPN,Value\nR1,10k\n"
    assert result.file.container.startswith("Part-")

    [params] = dispatched
    payload = json.loads(json.dumps(params.to_dict()))
    assert payload == {
        "scope": "Part",
        "job_id": result.job_id,
        "root": str(storage),
        "container": result.file.container,
        "file": "parts.csv",
        "container_store": "ImportContainer",
        "job_log": "ImportLog",
    }


def test_non_csv_upload_is_rejected_before_job_creation(storage, dispatched):
    with pytest.raises(ImportRejected):
        start_import("Part", _upload(content_type="application/pdf", name="parts.pdf"))

    assert _job_count() == 0
    assert list(storage.iterdir()) == []
    assert dispatched == []


def test_unknown_type_is_a_setup_error(dispatched):
    with pytest.raises(ImportSetupError):
        start_import("Gadget", _upload())
    assert _job_count() == 0


def test_missing_collaborator_is_a_setup_error(monkeypatch, dispatched):
    monkeypatch.setattr(config, "JOB_LOG", "NoSuchLog")
    with pytest.raises(ImportSetupError):
        start_import("Part", _upload())
    assert _job_count() == 0


def test_callback_receives_result_or_error(dispatched):
    seen = []
    result = start_import("Part", _upload(), callback=lambda err, res: seen.append((err, res)))
    assert seen == [(None, result)]

    seen.clear()
    with pytest.raises(ImportRejected):
        start_import("Part", _upload(content_type="text/plain"),
                     callback=lambda err, res: seen.append((err, res)))
    [(err, res)] = seen
    assert isinstance(err, ImportRejected) and res is None


def test_inline_dispatch_runs_to_completion(load_job):
    result = start_import("Part", _upload(), dispatch_mode="inline")

    job = load_job(result.job_id)
    assert job["status"] == "FINISHED"
    assert job["errors"] == []


def test_unknown_dispatch_mode(dispatched):
    with pytest.raises(ImportSetupError):
        start_import("Part", _upload(), dispatch_mode="carrier-pigeon")
    assert _job_count() == 0


class _FakeProcess:
    started = []

    def __init__(self, target, args, name, daemon):
        self.target, self.args, self.name, self.daemon = target, args, name, daemon
        self.pid = 4242

    def start(self):
        _FakeProcess.started.append(self)


class _FakeSpawnContext:
    Process = _FakeProcess


@pytest.fixture
def spawned(monkeypatch):
    """Record process-mode spawns and reaps without starting a child."""
    events = []
    _FakeProcess.started = []
    monkeypatch.setattr(launcher.multiprocessing, "get_context",
                        lambda method: events.append(("context", method)) or _FakeSpawnContext)
    monkeypatch.setattr(launcher.multiprocessing, "active_children",
                        lambda: events.append(("reap", None)) or [])
    return events


def test_process_dispatch_returns_while_job_is_pending(storage, load_job, spawned):
    result = start_import("Part", _upload(), dispatch_mode="process")

    assert load_job(result.job_id)["status"] == "PENDING"
    assert spawned == [("reap", None), ("context", "spawn")]

    [proc] = _FakeProcess.started
    assert proc.daemon is False
    assert proc.name == f"import-{result.job_id}"
    assert json.loads(proc.args[0])["job_id"] == result.job_id


def test_default_dispatch_without_broker_is_a_process(monkeypatch):
    monkeypatch.delenv("BULKIMPORT_DISPATCH", raising=False)
    monkeypatch.delenv("BULKIMPORT_BROKER_URL", raising=False)
    saved = dict(vars(config))
    try:
        importlib.reload(config)
        assert config.DISPATCH == "process"

        monkeypatch.setenv("BULKIMPORT_BROKER_URL", "redis://localhost:6379/0")
        importlib.reload(config)
        assert config.DISPATCH == "celery"
    finally:
        vars(config).update(saved)


def test_failed_dispatch_discards_job_and_container(storage, monkeypatch):
    def fail(params, mode=None):
        raise RuntimeError("broker unreachable")

    monkeypatch.setattr(launcher, "dispatch", fail)

    with pytest.raises(RuntimeError):
        start_import("Part", _upload())

    assert _job_count() == 0
    assert list(storage.iterdir()) == []
