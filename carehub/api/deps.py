from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.core.config import settings
from carehub.core.db import get_db
from carehub.models.user import User, CapabilityEnum
from carehub.services.roles import has_capability


bearer = HTTPBearer(auto_error=True)

async def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: AsyncSession = Depends(get_db),
) -> User:
    token = creds.credentials
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        sub: str | None = payload.get("sub")
        if not sub:
            raise HTTPException(status_code=401, detail="Invalid token")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    result = await db.execute(select(User).where(User.id == sub))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Inactive user")

    return user

# --- Capability-based dependency ---
# Ojo: se consulta la tabla en cada request; el claim del token no cuenta.
def require_capability(*caps: CapabilityEnum):
    async def _guard(
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ) -> User:
        for cap in caps:
            if await has_capability(db, user.id, cap):
                return user
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permission denied")
    return _guard
