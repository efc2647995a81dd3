from datetime import datetime, timedelta, timezone
from typing import Optional
from passlib.context import CryptContext

import base64
from io import BytesIO
import qrcode
from jose import jwt

from carehub.core.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(plain: str) -> str:
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)

def create_access_token(
        subject: str,
        extra: Optional[dict] = None,
        expires_minutes: int | None = None
        ) -> str:
    to_encode = {"sub": subject, "iat": datetime.now(tz=timezone.utc)}
    if extra:
        to_encode.update(extra)
    expire = datetime.now(tz=timezone.utc) + timedelta(
        minutes=expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

# --- QR para verificación pública ---

def verify_url_for(prescription_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/verify?id={prescription_id}"

def qr_png_base64_from_text(text: str) -> str:
    img = qrcode.make(text)          # -> PIL.Image.Image
    buf = BytesIO()
    img.save(buf, "PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")
