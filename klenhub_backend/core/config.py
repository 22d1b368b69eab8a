from pydantic_settings import BaseSettings
from pathlib import Path
from dotenv import load_dotenv
import os

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
PROJECT_DIR = BASE_DIR.parent


class Settings(BaseSettings):
    db_url: str = os.environ.get(
        "DATABASE_URL", "sqlite+aiosqlite:///./klenhub.sqlite3"
    )
    db_echo: bool = False

    HOST: str = os.environ.get("HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("PORT", "3000"))

    # Enable/disable file logging. Accept common truthy strings from env; default True
    LOGGER: bool = str(os.environ.get("LOGGER", "true")).lower() in (
        "1",
        "true",
        "yes",
        "on",
    )

    # Process supervisor
    PID_FILE: Path = Path(os.environ.get("PID_FILE", PROJECT_DIR / "server.pid"))
    LOG_FILE: Path = Path(os.environ.get("LOG_FILE", PROJECT_DIR / "server.log"))
    SHUTDOWN_ATTEMPTS: int = int(os.environ.get("SHUTDOWN_ATTEMPTS", "10"))
    SHUTDOWN_POLL_INTERVAL: float = float(
        os.environ.get("SHUTDOWN_POLL_INTERVAL", "1.0")
    )


settings = Settings()
