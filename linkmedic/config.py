"""Centralised settings for LinkMedic.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from the package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("LINKMEDIC_WORKSPACE", Path.home() / ".linkmedic")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "linkmedic.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # Analysis model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "openai")
    )
    openai_api_key: str = field(
        default_factory=lambda: os.environ.get("OPENAI_API_KEY", "")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )
    ollama_base_url: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_BASE_URL", "http://localhost:11434")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "llama3.1:8b")
    )

    # ------------------------------------------------------------------
    # Rate limiting (seconds between consecutive external calls)
    # ------------------------------------------------------------------
    analysis_delay: float = field(
        default_factory=lambda: float(os.environ.get("ANALYSIS_DELAY", "1.0"))
    )
    link_delay: float = field(
        default_factory=lambda: float(os.environ.get("LINK_DELAY", "1.0"))
    )

    # ------------------------------------------------------------------
    # Crawler
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    crawl_max_pages: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_MAX_PAGES", "50"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "LINKMEDIC_USER_AGENT",
            "Mozilla/5.0 (compatible; LinkMedic-Bot/1.0; +https://github.com/linkmedic)",
        )
    )

    # ------------------------------------------------------------------
    # Wayback Machine lookup
    # ------------------------------------------------------------------
    include_archive: bool = field(
        default_factory=lambda: _env_bool("INCLUDE_ARCHIVE")
    )
    archive_api_url: str = field(
        default_factory=lambda: os.environ.get(
            "ARCHIVE_API_URL", "https://archive.org/wayback/available"
        )
    )
    archive_timeout: float = field(
        default_factory=lambda: float(os.environ.get("ARCHIVE_TIMEOUT", "10.0"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton; import this everywhere:
#   from linkmedic.config import settings
settings = Settings()
