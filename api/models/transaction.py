import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import UUID, BigInteger, CheckConstraint, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from api.models.base import Base, enum_column, utcnow


class TransactionType(enum.Enum):
    COMMISSION = "commission"
    WITHDRAW = "withdraw"


class TransactionStatus(enum.Enum):
    PENDING = "pending"
    SUCCESS = "success"
    REJECTED = "rejected"
    FAILED = "failed"


class Transaction(Base):
    """
    One ledger entry. The partner balance is never stored, it is derived
    from these rows (see api.crud.ledger).
    """
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    partner_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("partners.id"), nullable=False, index=True)
    type: Mapped[TransactionType] = mapped_column(enum_column(TransactionType, "transactiontype"), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[TransactionStatus] = mapped_column(
        enum_column(TransactionStatus, "transactionstatus"),
        default=TransactionStatus.PENDING,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    proof_ref: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # Set only for invoice commissions; unique so an invoice can be credited once
    invoice_id: Mapped[Optional[uuid.UUID]] = mapped_column(ForeignKey("invoices.id"), nullable=True, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    partner: Mapped["Partner"] = relationship(back_populates="transactions")
    invoice: Mapped[Optional["Invoice"]] = relationship(back_populates="commission")
