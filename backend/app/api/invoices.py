"""Invoice routes: create, list, delete and fetch the rendered PDF."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from backend.app.core.errors import GenerationFailure, NotFoundError, StorageWriteFailure
from backend.app.core.security import get_current_user
from backend.app.db.session import get_db
from backend.app.dependencies.storage import get_blob_store
from backend.app.models.user import User
from backend.app.repositories.sql import SQLInvoiceRepository, SQLTemplateRepository
from backend.app.schemas.invoice import InvoiceCreate, InvoiceRead
from backend.app.services import invoices as invoice_service
from backend.app.services.invoice_documents import get_invoice_pdf
from backend.app.services.ownership import INVOICE_NOT_FOUND
from backend.app.storage.blob_store import BlobStore

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_in: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return invoice_service.create_invoice(
            db,
            template_id=invoice_in.template_id,
            data_values=invoice_in.invoice_data,
            owner_email=current_user.email,
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=List[InvoiceRead])
async def list_invoices(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return invoice_service.list_invoices(db, owner_email=current_user.email)


@router.get(
    "/{invoice_id}",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
def get_invoice_document(
    invoice_id: int,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    try:
        rendered = get_invoice_pdf(
            invoice_id,
            current_user.email,
            invoice_repository=SQLInvoiceRepository(db),
            template_repository=SQLTemplateRepository(db),
            blob_store=blob_store,
        )
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVOICE_NOT_FOUND)
    except (GenerationFailure, StorageWriteFailure):
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve invoice")

    return Response(
        content=rendered.content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="invoice-{invoice_id}.pdf"',
            "Cache-Control": "private, max-age=3600",
        },
    )


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    try:
        invoice_service.delete_invoice(db, blob_store, invoice_id=invoice_id, owner_email=current_user.email)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVOICE_NOT_FOUND)
    return {"message": "Invoice deleted successfully"}
