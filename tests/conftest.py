"""
Fixtures compartidas: sqlite en memoria por test, app con get_db pisado y
un set de datos mínimo (doctor con turno, pacientes, admin, impostor).
"""
import os

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"

from datetime import date, datetime, timedelta
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import carehub.models  # noqa: F401
from carehub.core.db import Base, get_db
from carehub.core.security import create_access_token
from carehub.main import app
from carehub.models.appointment import Appointment, ApptStatus
from carehub.models.doctor import Doctor
from carehub.models.patient import Patient
from carehub.models.user import User, UserCapability, CapabilityEnum


@pytest_asyncio.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest_asyncio.fixture
async def db(session_factory, seed):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, seed):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seed(session_factory):
    async with session_factory() as s:
        users = {
            "doctor": User(email="house@example.com", full_name="Gregory House", hashed_password="!"),
            "doctor2": User(email="wilson@example.com", full_name="James Wilson", hashed_password="!"),
            "impostor": User(email="impostor@example.com", full_name="Frank Abagnale", hashed_password="!"),
            "patient": User(email="jane@example.com", full_name="Jane Roe", hashed_password="!"),
            "patient2": User(email="john@example.com", full_name="John Doe", hashed_password="!"),
            "admin": User(email="admin@example.com", full_name="Lisa Cuddy", hashed_password="!"),
            "inactive_doctor": User(email="old@example.com", full_name="Old Doc", hashed_password="!", is_active=False),
        }
        s.add_all(users.values())
        await s.flush()

        grants = {
            "doctor": [CapabilityEnum.doctor],
            "doctor2": [CapabilityEnum.doctor],
            "patient": [CapabilityEnum.patient],
            "patient2": [CapabilityEnum.patient],
            "admin": [CapabilityEnum.admin],
            "inactive_doctor": [CapabilityEnum.doctor],
            # impostor: tiene perfil de doctor pero ningún permiso
        }
        for key, caps in grants.items():
            for cap in caps:
                s.add(UserCapability(user_id=users[key].id, capability=cap))

        doctor = Doctor(user_id=users["doctor"].id, name="Dr. Gregory House", email="house@example.com",
                        phone="555-0100", specialty="Internal Medicine", license="LIC-12345")
        doctor2 = Doctor(user_id=users["doctor2"].id, name="Dr. James Wilson",
                         specialty="Oncology", license="LIC-67890")
        impostor_doc = Doctor(user_id=users["impostor"].id, name="Dr. Frank", specialty="Surgery")
        inactive_doc = Doctor(user_id=users["inactive_doctor"].id, name="Dr. Old", specialty="General")

        patient = Patient(id="p1", user_id=users["patient"].id, name="Jane Roe",
                          email="jane@example.com", phone="555-0199", doc_id="30111222",
                          birth_date=date(1990, 5, 17))
        patient2 = Patient(id="p2", user_id=users["patient2"].id, name="John Doe",
                           email="john@example.com", birth_date=date(1985, 1, 2))
        patient3 = Patient(id="p3", name="Ann Cancelled")
        s.add_all([doctor, doctor2, impostor_doc, inactive_doc, patient, patient2, patient3])
        await s.flush()

        start = datetime(2026, 10, 1, 10, 0)
        s.add_all([
            Appointment(doctor_id=doctor.id, patient_id="p1", starts_at=start,
                        ends_at=start + timedelta(minutes=30), status=ApptStatus.confirmed),
            Appointment(doctor_id=doctor.id, patient_id="p3", starts_at=start,
                        ends_at=start + timedelta(minutes=30), status=ApptStatus.cancelled),
            Appointment(doctor_id=impostor_doc.id, patient_id="p1", starts_at=start,
                        ends_at=start + timedelta(minutes=30), status=ApptStatus.pending),
            Appointment(doctor_id=inactive_doc.id, patient_id="p1", starts_at=start,
                        ends_at=start + timedelta(minutes=30), status=ApptStatus.pending),
        ])
        await s.commit()

        return SimpleNamespace(
            users=users,
            doctor=doctor,
            doctor2=doctor2,
            impostor_doc=impostor_doc,
            patient=patient,
            patient2=patient2,
            patient3=patient3,
        )


@pytest.fixture
def auth():
    """auth(user, **claims) -> headers con un JWT firmado para ese usuario."""
    def _auth(user: User, **claims) -> dict:
        token = create_access_token(subject=user.id, extra=claims or None)
        return {"Authorization": f"Bearer {token}"}
    return _auth


@pytest.fixture
def rx_body():
    def _body(**overrides) -> dict:
        body = {
            "patient_id": "p1",
            "diagnosis": "Acute bronchitis",
            "medicines": [{"name": "Amoxicillin", "dosage": "500mg twice daily for 7 days"}],
        }
        body.update(overrides)
        return body
    return _body