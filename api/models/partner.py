import enum
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import UUID, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.models.base import Base, enum_column, utcnow


class PartnerStatus(enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class Partner(Base):
    __tablename__ = "partners"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True, unique=True)
    whatsapp_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    affiliate_code: Mapped[Optional[str]] = mapped_column(String, nullable=True, unique=True)

    # Payout requisites
    bank_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    account_number: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    account_holder: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    status: Mapped[PartnerStatus] = mapped_column(
        enum_column(PartnerStatus, "partnerstatus"),
        default=PartnerStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    surveys: Mapped[List["Survey"]] = relationship(back_populates="partner")
    invoices: Mapped[List["Invoice"]] = relationship(back_populates="partner")
    transactions: Mapped[List["Transaction"]] = relationship(back_populates="partner")
