"""
Environment-driven settings for the notification engine.

Values are read from os.environ on each call so tests can monkeypatch them.
.env / .env.local are loaded by the process entry point (or the root
conftest) through python-dotenv.
"""

import logging
import os

DEFAULT_EDITION_SCHEDULE_PAGE_SIZE = 1000
DEFAULT_POOL_SIZE = 5


def is_dev_mode() -> bool:
    """Check if running in development mode (DEV_MODE env)."""
    return os.getenv("DEV_MODE", "").lower() in ("true", "1", "yes")


def get_database_url() -> str:
    """
    Async database URL.

    A plain postgresql:// URL is switched to the asyncpg driver.
    """
    database_url = os.environ.get("DATABASE_URL")
    if not database_url:
        raise ValueError("DATABASE_URL environment variable must be set")

    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def get_sync_database_url() -> str:
    """Synchronous (psycopg2) URL for Alembic migrations."""
    database_url = os.environ.get("DATABASE_URL", "")

    if "postgresql+asyncpg://" in database_url:
        return database_url.replace("postgresql+asyncpg://", "postgresql://")
    if database_url.startswith("postgresql://"):
        return database_url

    raise ValueError("DATABASE_URL must be set for migrations")


def is_sql_echo_enabled() -> bool:
    return os.environ.get("SQL_ECHO", "").lower() == "true"


def get_pool_size() -> int:
    return int(os.getenv("DB_POOL_SIZE", str(DEFAULT_POOL_SIZE)))


def get_edition_schedule_page_size() -> int:
    """Page size used when walking every personal schedule of an edition."""
    page_size = int(
        os.getenv(
            "EDITION_SCHEDULE_PAGE_SIZE", str(DEFAULT_EDITION_SCHEDULE_PAGE_SIZE)
        )
    )
    if page_size < 1:
        raise ValueError("EDITION_SCHEDULE_PAGE_SIZE must be a positive integer")
    return page_size


def get_push_provider_name() -> str:
    """Which push provider build_dispatcher() falls back to ("logging")."""
    return os.getenv("PUSH_PROVIDER", "logging").lower()


def configure_logging() -> None:
    """Root logging setup from LOG_LEVEL (defaults to DEBUG in dev, INFO otherwise)."""
    default_level = "DEBUG" if is_dev_mode() else "INFO"
    level = os.getenv("LOG_LEVEL", default_level).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Required environment variables
# Format: (name, description, required_in_dev)
REQUIRED_ENV_VARS = [
    ("DATABASE_URL", "PostgreSQL connection string", True),
    ("PUSH_PROVIDER", "Push provider name (falls back to logging)", False),
]


def check_required_env_vars() -> tuple[bool, list[str]]:
    """
    Check that required environment variables are set.

    Returns:
        (all_ok, warnings): Tuple of success flag and list of warning messages
    """
    warnings = []
    errors = []
    in_dev = is_dev_mode()

    for name, description, required_in_dev in REQUIRED_ENV_VARS:
        if os.environ.get(name):
            continue
        if required_in_dev:
            errors.append(f"{name}: Not set ({description})")
        elif not in_dev:
            warnings.append(f"{name}: Not set ({description})")

    return not errors, errors + warnings
