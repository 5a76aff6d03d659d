import uuid
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.database import get_session
from api.errors import BusinessRuleError, to_http
from api.models.invoice import PaymentStatus
from .schemas import InvoiceApproval, InvoiceApproveRequest, InvoiceCreate, InvoiceRead
from .service import InvoiceService

router = APIRouter()

def get_invoice_service(session: AsyncSession = Depends(get_session)) -> InvoiceService:
    return InvoiceService(session)

@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED, summary="Register a finalized invoice")
async def create_invoice(
    dto: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service)
):
    try:
        return await service.create_invoice(dto)
    except BusinessRuleError as e:
        raise to_http(e)

@router.get("", response_model=list[InvoiceRead], summary="List invoices, optionally by payment status")
async def list_invoices(
    payment_status: PaymentStatus | None = Query(None, description="Filter by payment status"),
    service: InvoiceService = Depends(get_invoice_service)
):
    return await service.list_invoices(payment_status)

@router.get("/{invoice_id}", response_model=InvoiceRead, summary="Get an invoice")
async def get_invoice(
    invoice_id: uuid.UUID,
    service: InvoiceService = Depends(get_invoice_service)
):
    try:
        return await service.get_invoice(invoice_id)
    except BusinessRuleError as e:
        raise to_http(e)

@router.patch("/{invoice_id}/approve", response_model=InvoiceApproval, summary="Approve an invoice payment")
async def approve_invoice(
    invoice_id: uuid.UUID,
    dto: InvoiceApproveRequest | None = None,
    service: InvoiceService = Depends(get_invoice_service)
):
    try:
        return await service.approve(invoice_id, dto.proof_ref if dto else None)
    except BusinessRuleError as e:
        raise to_http(e)

@router.patch("/{invoice_id}/reject", response_model=InvoiceRead, summary="Reject an invoice payment")
async def reject_invoice(
    invoice_id: uuid.UUID,
    service: InvoiceService = Depends(get_invoice_service)
):
    try:
        return await service.reject(invoice_id)
    except BusinessRuleError as e:
        raise to_http(e)
