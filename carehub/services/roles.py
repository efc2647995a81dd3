"""
Role Authority: resuelve si un usuario tiene una capability ("doctor", ...).

Siempre consulta la tabla user_capabilities. El claim de roles que viaja en el
JWT es solo para la UI y nunca se usa para autorizar.
"""
import logging

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from carehub.models.user import User, UserCapability, CapabilityEnum
from carehub.models.doctor import Doctor
from carehub.models.patient import Patient

logger = logging.getLogger(__name__)


async def has_capability(db: AsyncSession, user_id: str | None, capability: CapabilityEnum | str) -> bool:
    """Usuario desconocido, inactivo o sin el permiso -> False (no es error)."""
    if not user_id:
        return False
    try:
        cap = CapabilityEnum(capability)
    except ValueError:
        return False
    q = (
        select(UserCapability.id)
        .join(User, User.id == UserCapability.user_id)
        .where(
            UserCapability.user_id == user_id,
            UserCapability.capability == cap,
            User.is_active.is_(True),
        )
    )
    return (await db.execute(q)).first() is not None


async def list_capabilities(db: AsyncSession, user_id: str) -> list[CapabilityEnum]:
    res = await db.execute(
        select(UserCapability.capability)
        .where(UserCapability.user_id == user_id)
        .order_by(UserCapability.capability)
    )
    return list(res.scalars())


async def grant_capability(db: AsyncSession, user_id: str, capability: CapabilityEnum) -> bool:
    """Idempotente. Devuelve True si se agregó algo."""
    exists = await db.execute(
        select(UserCapability.id).where(
            UserCapability.user_id == user_id,
            UserCapability.capability == capability,
        )
    )
    if exists.first() is not None:
        return False
    db.add(UserCapability(user_id=user_id, capability=capability))
    try:
        await db.commit()
    except IntegrityError:
        # otro request lo otorgó entre el select y el insert (uq_user_capability)
        await db.rollback()
        return False
    logger.info("capability %s granted to user %s", capability.value, user_id)
    return True


async def revoke_capability(db: AsyncSession, user_id: str, capability: CapabilityEnum) -> bool:
    res = await db.execute(
        delete(UserCapability).where(
            UserCapability.user_id == user_id,
            UserCapability.capability == capability,
        )
    )
    await db.commit()
    removed = (res.rowcount or 0) > 0
    if removed:
        logger.info("capability %s revoked from user %s", capability.value, user_id)
    return removed


# --- perfiles vinculados al usuario ---

async def get_linked_doctor(db: AsyncSession, user_id: str) -> Doctor | None:
    res = await db.execute(select(Doctor).where(Doctor.user_id == user_id))
    return res.scalar_one_or_none()

async def get_linked_patient(db: AsyncSession, user_id: str) -> Patient | None:
    res = await db.execute(select(Patient).where(Patient.user_id == user_id))
    return res.scalar_one_or_none()
