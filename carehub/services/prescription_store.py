"""
Prescription Store.

- get_by_id: sin control de acceso; conocer el id (token no adivinable) ES la
  autorización de lectura. Lo usan la vista del dueño y la verificación pública.
- list_by_doctor / list_by_patient: solo el propio doctor/paciente o un admin.
- create: un único insert atómico (receta + items) o nada.
"""
import logging
import re
import secrets
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.errors import Forbidden, StoreUnavailable
from carehub.models.prescription import Prescription, PrescriptionItem
from carehub.models.user import User, CapabilityEnum
from carehub.services.roles import has_capability, get_linked_doctor, get_linked_patient

logger = logging.getLogger(__name__)

ID_BYTES = 24  # 192 bits -> 32 chars urlsafe
_ID_RE = re.compile(r"^[A-Za-z0-9_-]{32}$")


def new_prescription_id() -> str:
    return secrets.token_urlsafe(ID_BYTES)

def is_well_formed_id(value: str | None) -> bool:
    return bool(value) and _ID_RE.match(value) is not None


async def create(
    db: AsyncSession,
    *,
    doctor_id: str,
    patient_id: str,
    patient_display_name: str,
    patient_age: int | None,
    diagnosis: str,
    medicines: list[tuple[str, str]],
    advice: str | None,
) -> Prescription:
    rx = Prescription(
        id=new_prescription_id(),
        doctor_id=doctor_id,
        patient_id=patient_id,
        patient_display_name=patient_display_name,
        patient_age=patient_age,
        diagnosis=diagnosis,
        advice=advice,
        issued_at=datetime.now(timezone.utc),
    )
    for idx, (name, dosage) in enumerate(medicines):
        rx.items.append(PrescriptionItem(position=idx, name=name, dosage=dosage))

    db.add(rx)
    try:
        await db.flush()
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("prescription insert failed (doctor %s)", doctor_id)
        raise StoreUnavailable()

    await db.refresh(rx, attribute_names=["items"])
    return rx


async def get_by_id(db: AsyncSession, rx_id: str) -> Prescription | None:
    q = select(Prescription).where(Prescription.id == rx_id)
    return (await db.execute(q)).scalar_one_or_none()


async def _is_admin(db: AsyncSession, caller: User) -> bool:
    return await has_capability(db, caller.id, CapabilityEnum.admin)


async def list_by_doctor(
    db: AsyncSession, caller: User, doctor_id: str, limit: int = 50, offset: int = 0
) -> list[Prescription]:
    if not await _is_admin(db, caller):
        mine = await get_linked_doctor(db, caller.id)
        if not mine or mine.id != doctor_id:
            logger.warning("user %s tried to list prescriptions of doctor %s", caller.id, doctor_id)
            raise Forbidden("you can only list your own prescriptions")

    q = (
        select(Prescription)
        .where(Prescription.doctor_id == doctor_id)
        .order_by(Prescription.issued_at.desc(), Prescription.id)
        .offset(offset).limit(limit)
    )
    return list((await db.execute(q)).scalars().unique())


async def list_by_patient(
    db: AsyncSession, caller: User, patient_id: str, limit: int = 50, offset: int = 0
) -> list[Prescription]:
    if not await _is_admin(db, caller):
        mine = await get_linked_patient(db, caller.id)
        if not mine or mine.id != patient_id:
            logger.warning("user %s tried to list prescriptions of patient %s", caller.id, patient_id)
            raise Forbidden("you can only list your own prescriptions")

    q = (
        select(Prescription)
        .where(Prescription.patient_id == patient_id)
        .order_by(Prescription.issued_at.desc(), Prescription.id)
        .offset(offset).limit(limit)
    )
    return list((await db.execute(q)).scalars().unique())
