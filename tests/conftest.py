"""Shared fixtures: in-memory database, test client and users."""
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tripdesk.config import settings
from tripdesk.database import Base
from tripdesk.main import app
from tripdesk.models import AgencyForm, AgencyStatus, Role, User
from tripdesk.services.security import create_session_token, hash_password

PASSWORD = "secret123"

AGENCY_FIELDS = {
    "name": "Sunrise Holidays",
    "contactPerson": "Asha Rao",
    "designation": "Director",
    "email": "contact@sunrise.example",
    "phoneNumber": "9876543210",
    "ownerName": "Asha Rao",
    "companyPhone": "2244556677",
    "website": "https://sunrise.example",
    "headquarters": "12 MG Road, Bengaluru",
    "country": "INDIA",
    "gstRegistered": "true",
    "gstNumber": "29ABCDE1234F1Z5",
    "agencyType": "TOUR_OPERATOR",
    "panType": "COMPANY",
}


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory(expire_on_commit=True)
    yield session
    session.close()


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_dir", str(tmp_path / "storage"))
    monkeypatch.setattr(settings, "smtp_host", "")
    monkeypatch.setattr(settings, "llm_provider", "mock")
    monkeypatch.setattr(settings, "approval_links_require_token", True)
    monkeypatch.setattr("tripdesk.services.llm_client.llm_client", None)


@pytest.fixture
def client(session_factory):
    previous = app.state.session_factory
    app.state.session_factory = session_factory
    yield TestClient(app)
    app.state.session_factory = previous


@pytest.fixture
def make_user(db):
    """Create and commit a user with the given role."""
    def _make(role: Role = Role.AGENCY_ADMIN, email: str = None, **kwargs) -> User:
        user = User(
            name=kwargs.pop("name", f"{role.value.title()} User"),
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            password_hash=hash_password(kwargs.pop("password", PASSWORD)),
            role=role,
            user_type=kwargs.pop("user_type", role.value),
            **kwargs,
        )
        db.add(user)
        db.flush()
        if role == Role.AGENCY_ADMIN and not user.agency_id:
            user.agency_id = user.id
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_session_token(user)}"}
    return _headers


@pytest.fixture
def make_agency(db):
    """Store an agency form for an agency admin directly."""
    def _make(owner: User, status: AgencyStatus = AgencyStatus.PENDING) -> AgencyForm:
        agency = AgencyForm(
            name="Sunrise Holidays",
            contact_person="Asha Rao",
            email="contact@sunrise.example",
            phone_number="9876543210",
            owner_name="Asha Rao",
            company_phone="2244556677",
            website="https://sunrise.example",
            headquarters="Bengaluru",
            country="INDIA",
            status=status,
            created_by=owner.id,
        )
        db.add(agency)
        db.commit()
        db.refresh(agency)
        return agency
    return _make


@pytest.fixture
def agency_fields():
    """A complete agency form as the browser posts it."""
    return dict(AGENCY_FIELDS)
