"""Start, stop and inspect the detached backend server.

A single instance is tracked through the PID file in `settings.PID_FILE`.
Every command that can change it runs under `pid_lock`.
"""
import asyncio
import os
import signal
import subprocess
import sys
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path

from klenhub_backend.core.config import PROJECT_DIR, settings
from klenhub_backend.core.logger import get_component_logger
from .exceptions import (
    InvalidPidFileError,
    PidFileError,
    PidFileMissingError,
    ServerAlreadyRunningError,
)
from .pidfile import (
    is_process_running,
    pid_lock,
    read_pid,
    remove_pid_file,
    write_pid,
)

logger = get_component_logger("supervisor")


class ShutdownResult(str, Enum):
    STALE = "stale"
    STOPPED = "stopped"
    KILLED = "killed"


class ServerState(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    STALE = "stale"
    UNKNOWN = "unknown"


@dataclass
class ServerStatus:
    state: ServerState
    pid: int | None = None
    started_at: datetime | None = None
    recent_logs: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def uptime(self) -> timedelta | None:
        if self.started_at is None:
            return None
        return datetime.now(timezone.utc) - self.started_at


def default_server_command() -> list[str]:
    return [sys.executable, "-m", "klenhub_backend.main"]


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    days, seconds = divmod(seconds, 24 * 3600)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return f"{days}d {hours}h {minutes}m {seconds}s"


def _clear_previous_instance(pid_file: Path) -> None:
    try:
        pid = read_pid(pid_file)
    except InvalidPidFileError as e:
        logger.warning("%s, removing it", e)
        remove_pid_file(pid_file)
        return

    if pid is None:
        return
    if is_process_running(pid):
        raise ServerAlreadyRunningError(pid)

    logger.info("found stale PID file for pid=%s, cleaning up", pid)
    remove_pid_file(pid_file)


def _spawn(command: list[str], log_file: Path) -> int:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "ab") as log:
        process = subprocess.Popen(
            command,
            cwd=PROJECT_DIR,
            stdin=subprocess.DEVNULL,
            stdout=log,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    return process.pid


def _start(pid_file: Path, log_file: Path, command: list[str] | None) -> int:
    _clear_previous_instance(pid_file)

    command = command or default_server_command()
    pid = _spawn(command, log_file)
    write_pid(pid_file, pid)
    logger.info("server started pid=%s log=%s command=%s", pid, log_file, command)
    return pid


def start_server(
    pid_file: Path | None = None,
    log_file: Path | None = None,
    command: list[str] | None = None,
) -> int:
    """Spawn the server detached and record its pid.

    Raises ServerAlreadyRunningError, without spawning anything, when the PID
    file points at a live process. A stale or corrupted PID file is removed.
    """
    pid_file = Path(pid_file or settings.PID_FILE)
    log_file = Path(log_file or settings.LOG_FILE)
    with pid_lock(pid_file):
        return _start(pid_file, log_file, command)


async def _shutdown(pid_file: Path, attempts: int, interval: float) -> ShutdownResult:
    pid = read_pid(pid_file)
    if pid is None:
        raise PidFileMissingError(pid_file)

    if not is_process_running(pid):
        logger.info("pid=%s is not running, removing PID file", pid)
        remove_pid_file(pid_file)
        return ShutdownResult.STALE

    try:
        logger.info("sending SIGTERM to pid=%s", pid)
        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            return ShutdownResult.STOPPED

        for attempt in range(1, attempts + 1):
            await asyncio.sleep(interval)
            if not is_process_running(pid):
                logger.info("pid=%s exited after %s poll(s)", pid, attempt)
                return ShutdownResult.STOPPED

        logger.warning(
            "pid=%s still alive after %s polls, sending SIGKILL", pid, attempts
        )
        try:
            os.kill(pid, signal.SIGKILL)
        except OSError as e:
            logger.error("failed to force shutdown pid=%s: %s", pid, e)
        return ShutdownResult.KILLED
    finally:
        remove_pid_file(pid_file)


async def shutdown_server(
    pid_file: Path | None = None,
    attempts: int | None = None,
    interval: float | None = None,
) -> ShutdownResult:
    """SIGTERM the recorded server, escalating to SIGKILL after `attempts` polls."""
    pid_file = Path(pid_file or settings.PID_FILE)
    attempts = settings.SHUTDOWN_ATTEMPTS if attempts is None else attempts
    interval = settings.SHUTDOWN_POLL_INTERVAL if interval is None else interval
    with pid_lock(pid_file):
        return await _shutdown(pid_file, attempts, interval)


async def restart_server(
    pid_file: Path | None = None,
    log_file: Path | None = None,
    command: list[str] | None = None,
    attempts: int | None = None,
    interval: float | None = None,
) -> int:
    """Stop the recorded instance, if any, then start a new detached one."""
    pid_file = Path(pid_file or settings.PID_FILE)
    log_file = Path(log_file or settings.LOG_FILE)
    attempts = settings.SHUTDOWN_ATTEMPTS if attempts is None else attempts
    interval = settings.SHUTDOWN_POLL_INTERVAL if interval is None else interval

    with pid_lock(pid_file):
        try:
            result = await _shutdown(pid_file, attempts, interval)
            logger.info("previous instance shut down: %s", result.value)
        except PidFileError as e:
            logger.info("nothing to stop before restart: %s", e)
        return _start(pid_file, log_file, command)


def _tail(path: Path, lines: int) -> list[str]:
    if lines <= 0:
        return []
    try:
        with open(path, encoding="utf-8", errors="replace") as handle:
            return [line.rstrip("\n") for line in deque(handle, maxlen=lines)]
    except FileNotFoundError:
        return []


def server_status(
    pid_file: Path | None = None,
    log_file: Path | None = None,
    tail: int = 5,
) -> ServerStatus:
    pid_file = Path(pid_file or settings.PID_FILE)
    log_file = Path(log_file or settings.LOG_FILE)

    with pid_lock(pid_file):
        try:
            pid = read_pid(pid_file)
        except InvalidPidFileError as e:
            return ServerStatus(state=ServerState.UNKNOWN, error=str(e))

        if pid is None:
            return ServerStatus(state=ServerState.STOPPED)

        if not is_process_running(pid):
            logger.info("status found stale PID file for pid=%s, removing it", pid)
            remove_pid_file(pid_file)
            return ServerStatus(state=ServerState.STALE, pid=pid)

        started_at = datetime.fromtimestamp(
            pid_file.stat().st_mtime, tz=timezone.utc
        )

    return ServerStatus(
        state=ServerState.RUNNING,
        pid=pid,
        started_at=started_at,
        recent_logs=_tail(log_file, tail),
    )
