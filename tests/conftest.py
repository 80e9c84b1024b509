import pytest

from digiwallet.container import Container
from digiwallet.services.qr_directory import QRCodeDirectory
from digiwallet.services.session_store import SessionStore

from tests.fakes import TODAY, FakeDatabase, memory_repositories, seed


@pytest.fixture
def db():
    database = FakeDatabase()
    seed(database)
    return database


@pytest.fixture
def repos():
    return memory_repositories()


@pytest.fixture
def sessions():
    return SessionStore()


@pytest.fixture
def container(db, repos, sessions):
    return Container(
        db,
        repos=repos,
        sessions=sessions,
        qr_directory=QRCodeDirectory(currency="TRY"),
        cashback_today=lambda: TODAY,
    )
