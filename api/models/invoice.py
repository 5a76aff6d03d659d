import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UUID, BigInteger, Boolean, CheckConstraint, DateTime, ForeignKey, String, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.models.base import Base, enum_column, utcnow


class PaymentStatus(enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("total_amount > 0", name="ck_invoices_total_amount_positive"),
        CheckConstraint(
            "commission_paid = false OR payment_status = 'paid'",
            name="ck_invoices_commission_only_when_paid",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_number: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    survey_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("surveys.id"), nullable=True, index=True)
    partner_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("partners.id"), nullable=True, index=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    invoice_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Smallest currency unit
    total_amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        enum_column(PaymentStatus, "paymentstatus"),
        default=PaymentStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_proof_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    commission_paid: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    paid_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    survey: Mapped[Optional["Survey"]] = relationship(back_populates="invoices")
    partner: Mapped[Optional["Partner"]] = relationship(back_populates="invoices")
    commission: Mapped[Optional["Transaction"]] = relationship(back_populates="invoice")
