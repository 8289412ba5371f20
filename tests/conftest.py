"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Any, Dict, List
from sqlalchemy import create_engine, Column, Integer, String
from sqlalchemy.orm import declarative_base, sessionmaker

from rankmerge.logger import StructuredLogger, reset_logger

Base = declarative_base()


class Job(Base):
    """Job posting model used as the rich record shape."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True)
    role_id = Column(String, nullable=False)  # company|source:source_id
    company = Column(String, nullable=False)
    title = Column(String, nullable=False)


class Posting:
    """Plain attribute record, outside any ORM."""

    def __init__(self, id, title):
        self.id = id
        self.title = title


@pytest.fixture(autouse=True)
def fresh_global_logger():
    """Keep the global logger from leaking metrics between tests."""
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def quiet_logger() -> StructuredLogger:
    """Logger with no console or file output."""
    return StructuredLogger(name="rankmerge.test", enable_console=False)


@pytest.fixture
def ranked() -> Dict[str, float]:
    """Trending jobs window, highest score first."""
    return {"job:3": 30.0, "job:1": 20.0, "job:2": 10.0}


@pytest.fixture
def job_rows() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "role_id": "acme|greenhouse:12345", "company": "acme", "title": "software engineer"},
        {"id": 2, "role_id": "beta|lever:67890", "company": "beta", "title": "product manager"},
        {"id": 3, "role_id": "gamma|ashby:555", "company": "gamma", "title": "data scientist"},
    ]


@pytest.fixture
def db_session(tmp_path, job_rows):
    """Temporary SQLite database populated with job_rows."""
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    session.add_all(Job(**row) for row in job_rows)
    session.commit()
    yield session
    session.close()
    engine.dispose()
