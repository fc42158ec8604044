import os

# Must be set before anything imports specbuilder.settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LLM_API_KEY"] = "test-key"

import pytest

from specbuilder.database import Base, engine, SessionLocal
from specbuilder.models import db_models  # noqa: F401


@pytest.fixture(autouse=True)
def fresh_tables():
    """Every test starts from empty tables on the shared in-memory database."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
