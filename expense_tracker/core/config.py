from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


@dataclass(slots=True)
class Settings:
    app_name: str = "Expense Tracker"
    host: str = field(default_factory=lambda: os.getenv("EXPENSES_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("EXPENSES_PORT", "8765")))
    allow_lan: bool = field(default_factory=lambda: os.getenv("EXPENSES_ALLOW_LAN", "0") == "1")
    data_dir: Path = field(
        default_factory=lambda: Path(os.getenv("EXPENSES_DATA_DIR", str(Path.home() / ".expense_tracker")))
    )
    db_name: str = "expenses.db"
    db_url_override: str = field(default_factory=lambda: os.getenv("EXPENSES_DB_URL", ""))
    client_url: str = field(default_factory=lambda: os.getenv("EXPENSES_CLIENT_URL", ""))
    api_url: str = field(default_factory=lambda: os.getenv("EXPENSES_API_URL", ""))
    log_level: str = field(default_factory=lambda: os.getenv("EXPENSES_LOG_LEVEL", "INFO").upper())

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name

    @property
    def db_url(self) -> str:
        return self.db_url_override or f"sqlite+pysqlite:///{self.db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.db_url.startswith("sqlite")

    @property
    def base_url(self) -> str:
        """Where the submission client reaches the API."""
        return self.api_url or f"http://{self.host}:{self.port}"

    @property
    def cors_origins(self) -> list[str]:
        origins = [self.client_url, "http://localhost:5173"]
        return [origin for origin in origins if origin]


def get_settings() -> Settings:
    load_dotenv()
    settings = Settings()
    local_hosts = {"127.0.0.1", "localhost"}

    # There is no authentication layer, so never listen beyond loopback by accident.
    if settings.host not in local_hosts and not settings.allow_lan:
        raise ValueError("Refusing non-localhost bind unless EXPENSES_ALLOW_LAN=1.")

    if settings.port <= 0 or settings.port > 65535:
        raise ValueError(f"Invalid EXPENSES_PORT: {settings.port}")

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
