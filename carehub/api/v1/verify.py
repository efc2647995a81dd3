from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.db import get_db
from carehub.schemas.verification import VerificationView
from carehub.services.verification import verify

# público: sin get_current_user
router = APIRouter(tags=["verification"])

@router.get("/verify", response_model=VerificationView)
async def verify_prescription(
    id: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await verify(db, id)
