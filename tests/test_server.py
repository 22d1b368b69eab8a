import os

import pytest
from fastapi.testclient import TestClient

from klenhub_backend.core.config import settings
from klenhub_backend.main import app
from klenhub_backend.supervisor.pidfile import write_pid


@pytest.fixture
def pid_file(tmp_path, monkeypatch):
    path = tmp_path / "server.pid"
    monkeypatch.setattr(settings, "PID_FILE", path)
    return path


def test_graceful_shutdown_removes_own_pid_file(pid_file):
    write_pid(pid_file, os.getpid())

    with TestClient(app) as client:
        client.get("/api/health")
        assert pid_file.exists()

    assert not pid_file.exists()


def test_graceful_shutdown_keeps_foreign_pid_file(pid_file):
    foreign = os.getpid() + 1
    write_pid(pid_file, foreign)

    with TestClient(app):
        pass

    assert pid_file.read_text() == f"{foreign}\n"


def test_graceful_shutdown_keeps_garbage_pid_file(pid_file):
    pid_file.write_bytes(b"\xff\xfe\x00garbage")

    with TestClient(app):
        pass

    assert pid_file.read_bytes() == b"\xff\xfe\x00garbage"


def test_graceful_shutdown_without_pid_file(pid_file):
    with TestClient(app):
        pass

    assert not pid_file.exists()
