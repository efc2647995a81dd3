from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship, object_session
from sqlalchemy import String, Text, DateTime, ForeignKey, Integer, event
from carehub.core.db import Base
from carehub.core.errors import ImmutableRecordError

class Prescription(Base):
    __tablename__ = "prescriptions"

    # token opaco de alta entropía; es la "llave" de la verificación pública
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    doctor_id: Mapped[str] = mapped_column(ForeignKey("doctors.id"), index=True)
    patient_id: Mapped[str] = mapped_column(ForeignKey("patients.id"), index=True)

    # snapshot del paciente al emitir; no se re-sincroniza con el perfil
    patient_display_name: Mapped[str] = mapped_column(String(255))
    patient_age: Mapped[int | None] = mapped_column(Integer, nullable=True)

    diagnosis: Mapped[str] = mapped_column(Text)
    advice: Mapped[str | None] = mapped_column(Text, nullable=True)

    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)

    items: Mapped[list["PrescriptionItem"]] = relationship(
        back_populates="prescription",
        order_by="PrescriptionItem.position",
        lazy="selectin",
    )

    @property
    def medicines(self) -> list[dict]:
        return [{"name": it.name, "dosage": it.dosage} for it in self.items]


class PrescriptionItem(Base):
    __tablename__ = "prescription_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    prescription_id: Mapped[str] = mapped_column(ForeignKey("prescriptions.id"), index=True)

    position: Mapped[int] = mapped_column(Integer, default=0)
    name: Mapped[str] = mapped_column(String(200))
    dosage: Mapped[str] = mapped_column(String(200))

    prescription: Mapped["Prescription"] = relationship(back_populates="items")


# --- una receta emitida no se edita ni se borra ---

def _refuse_update(mapper, connection, target) -> None:
    sess = object_session(target)
    if sess is not None and sess.is_modified(target, include_collections=False):
        raise ImmutableRecordError(f"{type(target).__name__} is immutable once issued")

def _refuse_delete(mapper, connection, target) -> None:
    raise ImmutableRecordError(f"{type(target).__name__} cannot be deleted")

for _model in (Prescription, PrescriptionItem):
    event.listen(_model, "before_update", _refuse_update)
    event.listen(_model, "before_delete", _refuse_delete)
