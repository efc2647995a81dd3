from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.db import get_db
from carehub.core.errors import NotFound
from carehub.core.security import verify_url_for, qr_png_base64_from_text
from carehub.api.deps import get_current_user
from carehub.schemas.prescription import (
    PrescriptionCreate, PrescriptionOut, EligiblePatientOut, VerificationCodeOut, DocumentOut,
)
from carehub.models.prescription import Prescription
from carehub.models.doctor import Doctor
from carehub.models.user import User, CapabilityEnum
from carehub.services import issuance, prescription_store
from carehub.services.document_renderer import render_prescription_document
from carehub.services.roles import has_capability, get_linked_doctor, get_linked_patient

router = APIRouter(prefix="/prescriptions", tags=["prescriptions"])

# No hay PATCH ni DELETE: una receta emitida es inmutable.

async def _doctor_snapshot(db: AsyncSession, doctor_id: str) -> dict:
    doc = (await db.execute(select(Doctor).where(Doctor.id == doctor_id))).scalar_one_or_none()
    if not doc:
        return {}
    return {
        "id": doc.id,
        "name": doc.name,
        "license": doc.license,
        "specialty": doc.specialty,
    }

async def _to_out(db: AsyncSession, rx: Prescription) -> PrescriptionOut:
    out = PrescriptionOut.model_validate(rx, from_attributes=True)
    out.doctor = await _doctor_snapshot(db, rx.doctor_id)
    return out

async def _get_owned_or_404(db: AsyncSession, user: User, rx_id: str) -> Prescription:
    """Vista del dueño: doctor emisor, paciente o admin. El resto ve 404."""
    rx = await prescription_store.get_by_id(db, rx_id)
    if rx:
        if await has_capability(db, user.id, CapabilityEnum.admin):
            return rx
        doc = await get_linked_doctor(db, user.id)
        if doc and doc.id == rx.doctor_id:
            return rx
        pat = await get_linked_patient(db, user.id)
        if pat and pat.id == rx.patient_id:
            return rx
    raise NotFound("Prescription not found")

# ---------- issue ----------
@router.post("", response_model=PrescriptionOut, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    payload: PrescriptionCreate,
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    rx = await issuance.issue(db, current, payload)
    return await _to_out(db, rx)

@router.get("/patients/eligible", response_model=List[EligiblePatientOut])
async def list_eligible_patients(
    current: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    today = date.today()
    patients = await issuance.eligible_patients(db, current)
    return [EligiblePatientOut(id=p.id, name=p.name, age=p.age_on(today)) for p in patients]

# ---------- lists ----------
@router.get("/doctor/me", response_model=List[PrescriptionOut])
async def list_my_prescriptions_as_doctor(
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    doc = await get_linked_doctor(db, current.id)
    if not doc:
        raise HTTPException(status_code=404, detail="Doctor profile not found")
    rows = await prescription_store.list_by_doctor(db, current, doc.id, limit, offset)
    return [await _to_out(db, rx) for rx in rows]

@router.get("/patient/me", response_model=List[PrescriptionOut])
async def list_my_prescriptions_as_patient(
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    pat = await get_linked_patient(db, current.id)
    if not pat:
        raise HTTPException(status_code=404, detail="Patient profile not found")
    rows = await prescription_store.list_by_patient(db, current, pat.id, limit, offset)
    return [await _to_out(db, rx) for rx in rows]

@router.get("/doctor/{doctor_id}", response_model=List[PrescriptionOut])
async def list_prescriptions_by_doctor(
    doctor_id: str,
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    rows = await prescription_store.list_by_doctor(db, current, doctor_id, limit, offset)
    return [await _to_out(db, rx) for rx in rows]

@router.get("/patient/{patient_id}", response_model=List[PrescriptionOut])
async def list_prescriptions_by_patient(
    patient_id: str,
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    rows = await prescription_store.list_by_patient(db, current, patient_id, limit, offset)
    return [await _to_out(db, rx) for rx in rows]

# ---------- owner view ----------
@router.get("/{rx_id}", response_model=PrescriptionOut)
async def get_prescription(
    rx_id: str,
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
):
    rx = await _get_owned_or_404(db, current, rx_id)
    return await _to_out(db, rx)

@router.get("/{rx_id}/verification-code", response_model=VerificationCodeOut)
async def get_verification_code(
    rx_id: str,
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
):
    rx = await _get_owned_or_404(db, current, rx_id)
    url = verify_url_for(rx.id)
    return VerificationCodeOut(verify_url=url, qr_base64_png=qr_png_base64_from_text(url))

@router.post("/{rx_id}/document", response_model=DocumentOut)
async def generate_document(
    rx_id: str,
    db: AsyncSession = Depends(get_db),
    current: User = Depends(get_current_user),
):
    rx = await _get_owned_or_404(db, current, rx_id)
    html = await render_prescription_document(rx.id)
    return DocumentOut(prescription_id=rx.id, html=html)
