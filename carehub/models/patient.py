import uuid
import enum
from datetime import date
from sqlalchemy import String, Enum, ForeignKey, Date
from sqlalchemy.orm import Mapped, mapped_column
from carehub.core.db import Base

class SexEnum(str, enum.Enum):
    male = "male"
    female = "female"
    other = "other"

class Patient(Base):
    __tablename__ = "patients"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str | None] = mapped_column(String(36), ForeignKey("users.id"), unique=True, nullable=True)

    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    doc_id: Mapped[str | None] = mapped_column(String(64), nullable=True)   # DNI/Documento
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    sex: Mapped[SexEnum | None] = mapped_column(Enum(SexEnum), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    def age_on(self, day: date) -> int | None:
        if self.birth_date is None:
            return None
        bd = self.birth_date
        return day.year - bd.year - ((day.month, day.day) < (bd.month, bd.day))
