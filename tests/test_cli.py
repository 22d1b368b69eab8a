import pytest

from klenhub_backend import cli
from klenhub_backend.core.config import settings
from klenhub_backend.supervisor import control
from klenhub_backend.supervisor.exceptions import (
    PidFileMissingError,
    ServerAlreadyRunningError,
)


def test_start_prints_pid(monkeypatch, capsys):
    monkeypatch.setattr(control, "start_server", lambda: 4321)

    assert cli.main(["start"]) == 0
    out = capsys.readouterr().out
    assert "Server started with PID: 4321" in out
    assert str(settings.LOG_FILE) in out


def test_start_refuses_when_running(monkeypatch, capsys):
    def already_running():
        raise ServerAlreadyRunningError(99)

    monkeypatch.setattr(control, "start_server", already_running)

    assert cli.main(["start"]) == 1
    err = capsys.readouterr().err
    assert "already running with PID: 99" in err
    assert "klenhub shutdown" in err


def test_shutdown_without_pid_file(monkeypatch, capsys):
    async def missing():
        raise PidFileMissingError(settings.PID_FILE)

    monkeypatch.setattr(control, "shutdown_server", missing)

    assert cli.main(["shutdown"]) == 1
    assert "PID file not found" in capsys.readouterr().err


@pytest.mark.parametrize(
    "result, message",
    [
        (control.ShutdownResult.STOPPED, "shut down successfully"),
        (control.ShutdownResult.KILLED, "Forced shutdown"),
        (control.ShutdownResult.STALE, "not running"),
    ],
)
def test_shutdown_messages(monkeypatch, capsys, result, message):
    async def shutdown():
        return result

    monkeypatch.setattr(control, "shutdown_server", shutdown)

    assert cli.main(["shutdown"]) == 0
    assert message in capsys.readouterr().out


def test_status_when_stopped(capsys):
    settings.PID_FILE.unlink(missing_ok=True)

    assert cli.main(["--no-log", "status"]) == 0
    assert "Status: STOPPED" in capsys.readouterr().out


def test_seed_unknown_name(capsys):
    assert cli.main(["seed", "up", "--name", "nope"]) == 1
    assert "Unknown seeder: nope" in capsys.readouterr().err


def test_migrate_failure_exit_code(monkeypatch, capsys):
    from klenhub_backend.migrations import runner

    def broken(revision):
        raise RuntimeError("no such table: orders")

    monkeypatch.setattr(runner, "downgrade", broken)

    assert cli.main(["migrate", "downgrade"]) == 1
    assert "no such table: orders" in capsys.readouterr().err


def test_start_spawn_failure(monkeypatch, capsys):
    def no_python():
        raise FileNotFoundError(2, "No such file or directory", "python")

    monkeypatch.setattr(control, "start_server", no_python)

    assert cli.main(["start"]) == 1
    assert "Failed to start server" in capsys.readouterr().err


def test_restart_prints_new_pid(monkeypatch, capsys):
    async def restart():
        return 5678

    monkeypatch.setattr(control, "restart_server", restart)

    assert cli.main(["restart"]) == 0
    out = capsys.readouterr().out
    assert "Restarting server..." in out
    assert "Server restarted with PID: 5678" in out


def test_restart_spawn_failure(monkeypatch, capsys):
    async def restart():
        raise PermissionError(13, "Permission denied", "server.log")

    monkeypatch.setattr(control, "restart_server", restart)

    assert cli.main(["restart"]) == 1
    assert "Failed to restart server" in capsys.readouterr().err


def test_serve_runs_in_foreground(monkeypatch):
    from klenhub_backend import main as server

    calls = []
    monkeypatch.setattr(server, "main", lambda: calls.append("serve"))

    assert cli.main(["serve"]) == 0
    assert calls == ["serve"]


def test_migrate_current_prints_revision(monkeypatch, capsys):
    from klenhub_backend.migrations import runner

    monkeypatch.setattr(runner, "current", lambda: "0004")

    assert cli.main(["migrate", "current"]) == 0
    assert capsys.readouterr().out.strip() == "0004"


def test_migrate_current_unreachable_database(monkeypatch, capsys):
    from klenhub_backend.migrations import runner

    def unreachable():
        raise OSError("unable to open database file")

    monkeypatch.setattr(runner, "current", unreachable)

    assert cli.main(["migrate", "current"]) == 1
    assert "Migration failed: unable to open database file" in capsys.readouterr().err


def test_command_is_required():
    with pytest.raises(SystemExit):
        cli.main([])
