import sys
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from pantry.bootstrap import build_services
from pantry.storage.memory import InMemoryCatalogRepository
from pantry.storage.repositories import SqlCatalogRepository
from pantry.storage.seed import seed_catalog


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


@pytest.fixture(name="file_engine")
def file_engine_fixture(tmp_path):
    # Separate pooled connections, so concurrent writers really race.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'pantry.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    SQLModel.metadata.create_all(engine)
    seed_catalog(SqlCatalogRepository(lambda: Session(engine)))
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="memory_repo")
def memory_repo_fixture():
    repository = InMemoryCatalogRepository()
    seed_catalog(repository)
    return repository


@pytest.fixture(name="sql_repo")
def sql_repo_fixture(engine):
    repository = SqlCatalogRepository(lambda: Session(engine))
    seed_catalog(repository)
    return repository


@pytest.fixture(name="pantry")
def pantry_fixture(memory_repo):
    return build_services(memory_repo, max_workers=4)


@pytest.fixture(name="sql_pantry")
def sql_pantry_fixture(sql_repo):
    # One StaticPool connection: keep recipe preparation on the calling thread.
    return build_services(sql_repo, max_workers=1)
