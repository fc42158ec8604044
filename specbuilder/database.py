import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from specbuilder.settings import settings

DATABASE_URL = settings.get_database_url()


def _make_engine(url: str):
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees its own empty database
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    db_path = url[len("sqlite:///"):]
    os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
    return create_engine(url, connect_args={"check_same_thread": False})


engine = _make_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
