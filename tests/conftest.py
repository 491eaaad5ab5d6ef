import logging
import os
from datetime import date

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set test environment variables
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["THEME_NAME"] = "nicaragua"
os.environ["DEFAULT_LOCALE"] = "en"

from legal_profile.core.database import configure_sqlite  # noqa: E402
from legal_profile.models.base import Base  # noqa: E402
from legal_profile.services.user_legal_profile import (  # noqa: E402
    UserLegalProfileService,
)

THEME_NAME = "nicaragua"


@pytest.fixture(autouse=True)
def _strip_file_handlers():
    """Remove file handlers from root logger so tests never write to logs/app.log."""
    root = logging.getLogger()
    saved = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    for h in saved:
        root.removeHandler(h)
    yield
    for h in list(root.handlers):
        if isinstance(h, logging.FileHandler):
            root.removeHandler(h)
    for h in saved:
        root.addHandler(h)


@pytest.fixture
async def async_engine():
    """Create an in-memory async SQLite engine with all tables."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    configure_sqlite(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def async_session(async_engine):
    """Create an async session bound to the in-memory engine."""
    factory = async_sessionmaker(
        async_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with factory() as session:
        yield session


@pytest.fixture
def service(async_session):
    """UserLegalProfileService with English messages and the test theme."""
    return UserLegalProfileService(async_session, theme_name=THEME_NAME, locale="en")


@pytest.fixture
def general_law_attrs():
    return {
        "date_of_birth": date(1985, 3, 14),
        "marital_status": "single",
        "occupation": "programmer",
        "domicile": "Nicaragua",
    }


@pytest.fixture
def user_attrs():
    return {
        "name": "Rob Smith",
        "email": "rob@localhost",
        "identity_card_number": "123-456789-1234A",
        "terms": "1",
    }


@pytest.fixture
def user_params(user_attrs, general_law_attrs):
    """Form params as posted by the signup form, with nested general law."""
    return {**user_attrs, "general_law_attributes": dict(general_law_attrs)}
