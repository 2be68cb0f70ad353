"""Root pytest configuration for the festguide test suite."""

from pathlib import Path

import pytest
from dotenv import load_dotenv

# .env.local overrides .env, same as alembic/env.py
_root = Path(__file__).parent
load_dotenv(_root / ".env")
load_dotenv(_root / ".env.local", override=True)


@pytest.fixture(scope="session")
def event_loop_policy():
    """Default asyncio policy for every async test."""
    import asyncio

    return asyncio.DefaultEventLoopPolicy()


@pytest.fixture(autouse=True)
def no_registered_push_provider():
    """Tests never inherit a process-wide push provider from each other."""
    from festguide.notifications.channels.push import set_push_provider

    set_push_provider(None)
    yield
    set_push_provider(None)
