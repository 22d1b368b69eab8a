import os
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from klenhub_backend.app.admin.handler import router as admin_router
from klenhub_backend.core.config import settings
from klenhub_backend.core.logger import get_component_logger
from klenhub_backend.core.models import db_helper
from klenhub_backend.supervisor.exceptions import InvalidPidFileError
from klenhub_backend.supervisor.pidfile import read_pid, remove_pid_file

logger = get_component_logger("server")


def _release_pid_file() -> None:
    # Only the instance the PID file points at may remove it
    try:
        pid = read_pid(settings.PID_FILE)
    except InvalidPidFileError:
        return
    if pid == os.getpid():
        remove_pid_file(settings.PID_FILE)
        logger.info("PID file %s removed", settings.PID_FILE)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("server starting pid=%s", os.getpid())
    yield
    logger.info("received shutdown signal, closing server gracefully")
    await db_helper.dispose()
    logger.info("database connection closed")
    _release_pid_file()
    logger.info("server shutdown complete")


app = FastAPI(title="Klenhub backend", lifespan=lifespan)
app.include_router(admin_router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


def main() -> None:
    logger.info("serving on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    print("Starting...")
    try:
        main()
    except KeyboardInterrupt:
        print("Exit")
