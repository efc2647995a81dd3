"""
Emisión de recetas.

Chequeos en orden, cada uno con su motivo:
  1. capability "doctor" (tabla, no el rol del token)  -> Forbidden
  2. el paciente existe                                 -> NotFound
  3. hay un turno doctor/paciente no cancelado          -> Forbidden
  4. diagnosis 5..500 chars                             -> ValidationFailed
  5. al menos un medicamento completo, campos <= 200    -> ValidationFailed
  6. advice <= 1000                                     -> ValidationFailed
Recién después se escribe, en una sola transacción.
"""
import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.errors import Forbidden, NotFound, ValidationFailed
from carehub.models.appointment import Appointment, ApptStatus
from carehub.models.patient import Patient
from carehub.models.prescription import Prescription
from carehub.models.user import User, CapabilityEnum
from carehub.schemas.prescription import PrescriptionCreate, MedicineIn
from carehub.services import prescription_store
from carehub.services.roles import has_capability, get_linked_doctor

logger = logging.getLogger(__name__)

DIAGNOSIS_MIN, DIAGNOSIS_MAX = 5, 500
MEDICINE_FIELD_MAX = 200
ADVICE_MAX = 1000


async def _require_doctor_id(db: AsyncSession, user: User) -> str:
    if not await has_capability(db, user.id, CapabilityEnum.doctor):
        logger.warning("user %s without doctor capability tried to issue a prescription", user.id)
        raise Forbidden("forbidden")
    doc = await get_linked_doctor(db, user.id)
    if not doc:
        logger.warning("user %s has doctor capability but no doctor profile", user.id)
        raise Forbidden("forbidden")
    return doc.id


async def has_care_relationship(db: AsyncSession, doctor_id: str, patient_id: str) -> bool:
    q = select(Appointment.id).where(
        Appointment.doctor_id == doctor_id,
        Appointment.patient_id == patient_id,
        Appointment.status != ApptStatus.cancelled,
    ).limit(1)
    return (await db.execute(q)).first() is not None


def clean_diagnosis(raw: str | None) -> str:
    diagnosis = (raw or "").strip()
    if not (DIAGNOSIS_MIN <= len(diagnosis) <= DIAGNOSIS_MAX):
        raise ValidationFailed("diagnosis", "invalid diagnosis")
    return diagnosis


def clean_medicines(raw: list[MedicineIn | None] | None) -> list[tuple[str, str]]:
    kept: list[tuple[str, str]] = []
    for med in raw or []:
        if med is None:
            continue
        name, dosage = (med.name or "").strip(), (med.dosage or "").strip()
        if name and dosage:
            kept.append((name, dosage))
    if not kept:
        raise ValidationFailed("medicines", "at least one medicine required")

    for i, (name, dosage) in enumerate(kept):
        for field, value in (("name", name), ("dosage", dosage)):
            if len(value) > MEDICINE_FIELD_MAX:
                raise ValidationFailed(
                    f"medicines[{i}].{field}",
                    f"medicine fields must be between 1 and {MEDICINE_FIELD_MAX} characters",
                )
    return kept


def clean_advice(raw: str | None) -> str | None:
    if raw is None:
        return None
    advice = raw.strip()
    if len(advice) > ADVICE_MAX:
        raise ValidationFailed("advice", "advice too long")
    return advice or None


async def issue(db: AsyncSession, acting_user: User, payload: PrescriptionCreate) -> Prescription:
    doctor_id = await _require_doctor_id(db, acting_user)

    patient = None
    if payload.patient_id:
        patient = (await db.execute(
            select(Patient).where(Patient.id == payload.patient_id)
        )).scalar_one_or_none()
    if not patient:
        raise NotFound("patient not found")

    if not await has_care_relationship(db, doctor_id, patient.id):
        logger.warning("doctor %s has no care relationship with patient %s", doctor_id, patient.id)
        raise Forbidden("no care relationship")

    diagnosis = clean_diagnosis(payload.diagnosis)
    medicines = clean_medicines(payload.medicines)
    advice = clean_advice(payload.advice)

    rx = await prescription_store.create(
        db,
        doctor_id=doctor_id,
        patient_id=patient.id,
        patient_display_name=patient.name,
        patient_age=patient.age_on(date.today()),
        diagnosis=diagnosis,
        medicines=medicines,
        advice=advice,
    )
    logger.info("prescription %s issued by doctor %s", rx.id, doctor_id)
    return rx


async def eligible_patients(db: AsyncSession, acting_user: User) -> list[Patient]:
    """Pacientes con turno (no cancelado) con este doctor: la lista del formulario."""
    doctor_id = await _require_doctor_id(db, acting_user)
    q = (
        select(Patient)
        .join(Appointment, Appointment.patient_id == Patient.id)
        .where(
            Appointment.doctor_id == doctor_id,
            Appointment.status != ApptStatus.cancelled,
        )
        .order_by(Patient.name)
        .distinct()
    )
    return list((await db.execute(q)).scalars().unique())
