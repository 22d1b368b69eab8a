import os
import subprocess
import sys
import time

import pytest

from klenhub_backend.supervisor.exceptions import InvalidPidFileError
from klenhub_backend.supervisor.pidfile import (
    is_process_running,
    lock_path_for,
    pid_lock,
    read_pid,
    remove_pid_file,
    write_pid,
)


def dead_pid() -> int:
    process = subprocess.Popen([sys.executable, "-c", "pass"])
    process.wait()
    return process.pid


def test_own_process_is_running():
    assert is_process_running(os.getpid())


def test_exited_process_is_not_running():
    assert not is_process_running(dead_pid())


def test_unwaited_child_counts_as_exited():
    process = subprocess.Popen([sys.executable, "-c", "pass"])
    # Give it time to exit without reaping it ourselves
    for _ in range(100):
        if not is_process_running(process.pid):
            break
        time.sleep(0.05)
    assert not is_process_running(process.pid)


def test_read_pid_missing_file(tmp_path):
    assert read_pid(tmp_path / "server.pid") is None


def test_write_then_read_pid(tmp_path):
    pid_file = tmp_path / "run" / "server.pid"
    write_pid(pid_file, 4242)
    assert pid_file.read_text() == "4242\n"
    assert read_pid(pid_file) == 4242


@pytest.mark.parametrize(
    "content",
    [b"", b"   \n", b"abc", b"12abc", b"0", b"-5", b"\xff\xfe\x00garbage", b"99999999999999999999999"],
)
def test_read_pid_rejects_unusable_content(tmp_path, content):
    pid_file = tmp_path / "server.pid"
    pid_file.write_bytes(content)
    with pytest.raises(InvalidPidFileError):
        read_pid(pid_file)


def test_remove_pid_file_is_idempotent(tmp_path):
    pid_file = tmp_path / "server.pid"
    write_pid(pid_file, 1)
    remove_pid_file(pid_file)
    remove_pid_file(pid_file)
    assert not pid_file.exists()


def test_pid_lock_uses_sibling_lock_file(tmp_path):
    pid_file = tmp_path / "server.pid"
    with pid_lock(pid_file):
        assert lock_path_for(pid_file).exists()
    assert lock_path_for(pid_file) == tmp_path / "server.pid.lock"
