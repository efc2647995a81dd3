from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.db import get_db
from carehub.core.security import hash_password, verify_password, create_access_token
from carehub.models.user import User, UserCapability, CapabilityEnum
from carehub.models.patient import Patient
from carehub.schemas.auth import RegisterIn, LoginIn, TokenOut, UserOut
from carehub.api.deps import get_current_user
from carehub.services.roles import list_capabilities

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", response_model=UserOut, status_code=201)
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)):
    exists = await db.execute(select(User).where(User.email == payload.email.lower()))
    if exists.scalar_one_or_none():
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        email=payload.email.lower(),
        full_name=payload.full_name,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    await db.flush()
    # todo registro nuevo es paciente; doctor/admin solo por /admin/capabilities
    db.add(UserCapability(user_id=user.id, capability=CapabilityEnum.patient))
    db.add(Patient(user_id=user.id, name=payload.full_name, email=user.email, birth_date=payload.birth_date))
    await db.commit()
    await db.refresh(user)

    out = UserOut.model_validate(user, from_attributes=True)
    out.capabilities = await list_capabilities(db, user.id)
    return out

@router.post("/login", response_model=TokenOut)
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.email == payload.email.lower()))
    user = result.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Inactive user")

    # capabilities en el token: solo para que la UI decida qué mostrar
    caps = [c.value for c in await list_capabilities(db, user.id)]
    token = create_access_token(subject=user.id, extra={"capabilities": caps})
    return TokenOut(access_token=token)

@router.get("/me", response_model=UserOut)
async def me(current_user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    out = UserOut.model_validate(current_user, from_attributes=True)
    out.capabilities = await list_capabilities(db, current_user.id)
    return out
