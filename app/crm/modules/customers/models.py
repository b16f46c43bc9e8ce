from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base
from app.crm.modules.customers.utils import decode_hobbies

GENDERS = ("male", "female")


class Customer(Base):
    __tablename__ = "customers"
    __table_args__ = (
        UniqueConstraint("email", name="uq_customers_email"),
        CheckConstraint("gender IN ('male', 'female')", name="ck_customers_gender"),
        Index("idx_customers_updated_at", "updated_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    firstname: Mapped[str] = mapped_column(String(255), nullable=False)
    lastname: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    mobile: Mapped[str] = mapped_column(String(13), nullable=False)  # string: keeps leading zeros / "+"
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    gender: Mapped[str] = mapped_column(String(16), nullable=False)  # male, female

    # JSON array text, e.g. ["reading","traveling"]; "[]" when empty, never NULL.
    # Written through utils.encode_hobbies() by the store; read via .hobbies
    hobbies_json: Mapped[str] = mapped_column("hobbies", Text, nullable=False, default="[]")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def hobbies(self) -> list[str]:
        return decode_hobbies(self.hobbies_json)

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}"

    def hobby_count(self) -> int:
        return len(self.hobbies)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} email={self.email!r}>"
