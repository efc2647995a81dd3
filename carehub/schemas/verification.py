from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from carehub.schemas.prescription import MedicineOut


class VerifiedDoctor(BaseModel):
    name: str
    specialization: Optional[str] = None
    license_number: Optional[str] = None


class VerificationView(BaseModel):
    """Proyección pública: sin ids internos ni datos de contacto del paciente."""
    verified: bool = True
    display_id: str
    issued_at: datetime
    doctor: VerifiedDoctor
    patient_name: str
    patient_age: Optional[int] = None
    diagnosis: str
    medicines: List[MedicineOut] = Field(default_factory=list)
    advice: Optional[str] = None
