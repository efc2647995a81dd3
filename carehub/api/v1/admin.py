from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.db import get_db
from carehub.api.deps import require_capability
from carehub.models.user import User, CapabilityEnum
from carehub.schemas.auth import CapabilityIn, CapabilitiesOut
from carehub.services.roles import grant_capability, revoke_capability, list_capabilities

router = APIRouter(
    prefix="/admin/capabilities",
    tags=["admin"],
    dependencies=[Depends(require_capability(CapabilityEnum.admin))],
)

async def _user_or_404(db: AsyncSession, user_id: str) -> User:
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/{user_id}", response_model=CapabilitiesOut)
async def get_capabilities(user_id: str, db: AsyncSession = Depends(get_db)):
    await _user_or_404(db, user_id)
    return CapabilitiesOut(user_id=user_id, capabilities=await list_capabilities(db, user_id))

@router.post("", response_model=CapabilitiesOut)
async def grant(payload: CapabilityIn, db: AsyncSession = Depends(get_db)):
    await _user_or_404(db, payload.user_id)
    await grant_capability(db, payload.user_id, payload.capability)
    return CapabilitiesOut(user_id=payload.user_id, capabilities=await list_capabilities(db, payload.user_id))

@router.delete("", response_model=CapabilitiesOut)
async def revoke(payload: CapabilityIn, db: AsyncSession = Depends(get_db)):
    await _user_or_404(db, payload.user_id)
    await revoke_capability(db, payload.user_id, payload.capability)
    return CapabilitiesOut(user_id=payload.user_id, capabilities=await list_capabilities(db, payload.user_id))
