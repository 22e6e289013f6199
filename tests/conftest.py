"""
Shared fixtures: a throwaway SQLite row-store per test, seeded users and
books, and a TestClient whose Firebase token check is replaced by a fixed
token table.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from learnvow.core.config import settings
from learnvow.core.database import Base, build_engine, get_db
from learnvow.core.exceptions import UnauthenticatedError
from learnvow import models
from learnvow.models.enums import ContentType, UserRole
from learnvow.schemas.user_schema import TokenData


# bearer token -> identity Firebase would have returned
FAKE_TOKENS = {
    "token-reader": TokenData(firebase_uid="uid-reader", email="reader@example.com", name="Rina Reader"),
    "token-other": TokenData(firebase_uid="uid-other", email="other@example.com", name="Omar Other"),
    "token-admin": TokenData(firebase_uid="uid-admin", email="admin@example.com", name="Ada Admin"),
    "token-newcomer": TokenData(firebase_uid="uid-newcomer", email="newcomer@example.com", name="Nila Newcomer"),
}


def fake_verify_firebase_id_token(id_token: str) -> TokenData:
    try:
        return FAKE_TOKENS[id_token]
    except KeyError:
        raise UnauthenticatedError("Invalid or expired authentication token.") from None


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def engine(tmp_path):
    # File-backed so concurrent sessions in different threads share one store
    engine = build_engine(f"sqlite:///{tmp_path / 'learnvow-test.db'}", timeout_seconds=5)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def _add_user(db, firebase_uid, email, name, role=UserRole.CUSTOMER.value):
    user = models.User(firebase_uid=firebase_uid, email=email, name=name, role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def reader(db_session):
    return _add_user(db_session, "uid-reader", "reader@example.com", "Rina Reader")


@pytest.fixture
def other_reader(db_session):
    return _add_user(db_session, "uid-other", "other@example.com", "Omar Other")


@pytest.fixture
def admin(db_session):
    return _add_user(db_session, "uid-admin", "admin@example.com", "Ada Admin", role=UserRole.ADMIN.value)


@pytest.fixture
def ebook(db_session):
    book = models.Book(
        title="Padma River Boatman",
        author="Manik Bandopadhyay",
        category="Fiction",
        content_type=ContentType.EBOOK,
        price=Decimal("250.00"),
        currency="BDT",
        total_pages=320,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def audiobook(db_session):
    book = models.Book(
        title="Gitanjali",
        author="Rabindranath Tagore",
        category="Poetry",
        content_type=ContentType.AUDIOBOOK,
        price=Decimal("180.00"),
        currency="BDT",
        duration_seconds=5400,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def unpublished_book(db_session):
    book = models.Book(
        title="Draft Manuscript",
        author="Unknown",
        content_type=ContentType.EBOOK,
        price=Decimal("99.00"),
        is_published=False,
    )
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book


@pytest.fixture
def client(session_factory, monkeypatch):
    from learnvow.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    monkeypatch.setattr("learnvow.core.dependencies.verify_firebase_id_token", fake_verify_firebase_id_token)
    monkeypatch.setattr("learnvow.routes.auth_routes.verify_firebase_id_token", fake_verify_firebase_id_token)
    monkeypatch.setattr(settings, "PAYMENT_GATEWAY_DELAY_SECONDS", 0)
    monkeypatch.setattr(settings, "EMAIL_HOST", None)

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
