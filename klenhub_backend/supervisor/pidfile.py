import fcntl
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .exceptions import InvalidPidFileError

# pid_t is a signed 32-bit int
PID_MAX = 2**31 - 1


def _reap_if_child(pid: int) -> None:
    # An exited child of this process lingers as a zombie until waited on,
    # and a zombie still answers signal 0
    try:
        os.waitpid(pid, os.WNOHANG)
    except ChildProcessError:
        pass


def is_process_running(pid: int) -> bool:
    """Probe `pid` with signal 0: nothing is delivered, only existence is checked."""
    _reap_if_child(pid)
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, but belongs to another user
        return True
    return True


def read_pid(path: Path) -> int | None:
    """Return the pid stored in `path`, or None when there is no such file."""
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return None

    try:
        content = raw.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise InvalidPidFileError(path, raw.decode("utf-8", errors="replace")) from None

    try:
        pid = int(content)
    except ValueError:
        raise InvalidPidFileError(path, content) from None
    if not 0 < pid <= PID_MAX:
        raise InvalidPidFileError(path, content)
    return pid


def write_pid(path: Path, pid: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{pid}\n", encoding="utf-8")


def remove_pid_file(path: Path) -> None:
    path.unlink(missing_ok=True)


def lock_path_for(path: Path) -> Path:
    return path.with_name(f"{path.name}.lock")


@contextmanager
def pid_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive flock next to the PID file.

    Serializes start/shutdown/restart so two invocations can't both see
    "not running" and spawn a server each.
    """
    lock_file = lock_path_for(path)
    lock_file.parent.mkdir(parents=True, exist_ok=True)
    with open(lock_file, "a") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
