"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# This class reads configuration from TWO sources (in priority order):
#
#   1. **Environment variables** — e.g., DB_HOST=db.internal
#      (highest priority, always wins)
#   2. **.env file** — key=value lines in the project root .env file
#      (lower priority, used for local development)
#
# The mapping is automatic: field name `db_host` maps to env var `DB_HOST`,
# and `port` maps to `PORT` (pydantic-settings matches case-insensitively).
#
# Default values are used when neither an env var nor .env entry exists.
# .env.example lists every variable the service understands.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_DB_BACKENDS = ("postgresql", "sqlite")


class Settings(BaseSettings):
    """Feedback API settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Relational store ===
    # "postgresql" talks to a server built from the db_* fields below;
    # "sqlite" uses a local file at sqlite_path (development and tests).
    db_backend: str = "postgresql"
    db_host: str = "localhost"
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "feedback_db"
    db_port: int = 5432
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    sqlite_path: str = "data/feedback.db"

    # === App Config ===
    app_host: str = "0.0.0.0"
    port: int = 5000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_postgres_dsn(self) -> str:
        """Return a ``postgresql://`` DSN assembled from the db_* fields.

        The password is left out when empty so local trust-auth setups work.
        """
        credentials = self.db_user
        if self.db_password:
            credentials = f"{self.db_user}:{self.db_password}"
        return f"postgresql://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
