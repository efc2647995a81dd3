from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

# Entrada laxa a propósito: las reglas (largos, vacíos, nulls) las valida el
# servicio de emisión en orden, después de los chequeos de permisos.
class MedicineIn(BaseModel):
    name: Optional[str] = None
    dosage: Optional[str] = None

class PrescriptionCreate(BaseModel):
    # nombre/edad del paciente NO se aceptan del cliente; extra keys se ignoran
    patient_id: Optional[str] = None
    diagnosis: Optional[str] = None
    medicines: Optional[List[Optional[MedicineIn]]] = None
    advice: Optional[str] = None

class MedicineOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    name: str
    dosage: str

class PrescriptionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    doctor_id: str
    patient_id: str
    patient_display_name: str
    patient_age: Optional[int] = None
    diagnosis: str
    medicines: List[MedicineOut] = Field(default_factory=list)
    advice: Optional[str] = None
    issued_at: datetime
    doctor: Optional[dict] = None

class EligiblePatientOut(BaseModel):
    id: str
    name: str
    age: Optional[int] = None

class VerificationCodeOut(BaseModel):
    verify_url: str
    qr_base64_png: str

class DocumentOut(BaseModel):
    prescription_id: str
    html: str
