"""
Conftest for storage tests - minimal setup without database.
"""
import pytest


# Storage tests only touch the filesystem; skip the session-wide migrations
@pytest.fixture(scope="session")
def setup_database():
    """Skip database setup for storage tests."""
    pass
