class SupervisorError(Exception):
    """Base class for server lifecycle errors."""


class ServerAlreadyRunningError(SupervisorError):
    def __init__(self, pid: int):
        super().__init__(f"Server is already running with PID: {pid}")
        self.pid = pid


class PidFileError(SupervisorError):
    pass


class PidFileMissingError(PidFileError):
    def __init__(self, path):
        super().__init__(f"Server PID file not found at {path}. Server may not be running.")
        self.path = path


class InvalidPidFileError(PidFileError):
    def __init__(self, path, content: str):
        super().__init__(f"Invalid PID file content in {path}: {content!r}")
        self.path = path
        self.content = content
