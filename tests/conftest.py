"""
Pytest configuration and shared fixtures
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core import models  # noqa: F401
from app.domains.auth.service import AuthService
from app.domains.listings.service import ListingService
from app.domains.nfts.service import NftService
from app.domains.users.service import UserService
from app.main import app
from app.shared.database.connection import Base, get_db


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so every session gets its own connection."""
    test_engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False, "timeout": 15},
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(principal, codename=None):
        return UserService(db_session).upsert_user(principal, codename=codename)

    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice-wallet-0001", "ALICE")


@pytest.fixture
def bob(make_user):
    return make_user("bob-wallet-0002", "BOB")


@pytest.fixture
def carol(make_user):
    return make_user("carol-wallet-0003")


@pytest.fixture
def auth_headers(db_session):
    def _headers(user):
        token = AuthService(db_session).create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def listed_nft(db_session, alice):
    """An NFT minted by alice and listed at 1 SOL. Returns (nft, listing)."""
    nft = NftService(db_session).mint_nft_for_user(alice.id, "Alpha", "first drop")
    listing = ListingService(db_session).create_listing(nft.id, 1_000_000_000, alice.id)
    return nft, listing
