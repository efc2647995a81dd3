"""
Verificación pública (sin login) de una receta por su id.

Cualquier falla (id ausente, mal formado o inexistente) produce exactamente el
mismo NotFound, para no dar pistas sobre ids "casi válidos".
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.errors import NotFound
from carehub.models.doctor import Doctor
from carehub.schemas.prescription import MedicineOut
from carehub.schemas.verification import VerificationView, VerifiedDoctor
from carehub.services import prescription_store

logger = logging.getLogger(__name__)

NOT_FOUND_DETAIL = "Prescription not found or invalid"
DISPLAY_ID_LEN = 16


def display_id(rx_id: str) -> str:
    return f"{rx_id[:DISPLAY_ID_LEN]}..."


async def _doctor_credentials(db: AsyncSession, doctor_id: str) -> VerifiedDoctor:
    doc = (await db.execute(select(Doctor).where(Doctor.id == doctor_id))).scalar_one_or_none()
    if not doc:
        return VerifiedDoctor(name="N/A")
    return VerifiedDoctor(name=doc.name, specialization=doc.specialty, license_number=doc.license)


async def verify(db: AsyncSession, rx_id: str | None) -> VerificationView:
    if not prescription_store.is_well_formed_id(rx_id):
        logger.info("verification miss (malformed id)")
        raise NotFound(NOT_FOUND_DETAIL)

    rx = await prescription_store.get_by_id(db, rx_id)
    if not rx:
        logger.info("verification miss (unknown id)")
        raise NotFound(NOT_FOUND_DETAIL)

    return VerificationView(
        display_id=display_id(rx.id),
        issued_at=rx.issued_at,
        doctor=await _doctor_credentials(db, rx.doctor_id),
        patient_name=rx.patient_display_name,
        patient_age=rx.patient_age,
        diagnosis=rx.diagnosis,
        medicines=[MedicineOut(name=it.name, dosage=it.dosage) for it in rx.items],
        advice=rx.advice,
    )
