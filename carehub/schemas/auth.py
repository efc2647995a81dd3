from datetime import date
from pydantic import BaseModel, EmailStr, Field, ConfigDict

from carehub.models.user import CapabilityEnum

class RegisterIn(BaseModel):
    # no hay campo "role": los permisos los otorga un admin
    full_name: str = Field(..., min_length=2)
    email: EmailStr
    password: str = Field(..., min_length=6)
    birth_date: date | None = None

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)

class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    full_name: str
    email: EmailStr
    is_active: bool
    capabilities: list[CapabilityEnum] = []

class CapabilityIn(BaseModel):
    user_id: str
    capability: CapabilityEnum

class CapabilitiesOut(BaseModel):
    user_id: str
    capabilities: list[CapabilityEnum]
