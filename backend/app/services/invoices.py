"""Invoice creation, listing and deletion."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError
from backend.app.core.side_effects import run_side_effect
from backend.app.crud.crud_invoice import invoice_crud
from backend.app.crud.crud_template import template_crud
from backend.app.models.invoice import Invoice
from backend.app.repositories.sql import SQLInvoiceRepository, SQLTemplateRepository
from backend.app.services.ownership import get_owned_invoice
from backend.app.storage.blob_store import BlobStore

logger = logging.getLogger(__name__)


def create_invoice(db: Session, *, template_id: int, data_values: Dict[str, Any], owner_email: str) -> Invoice:
    template = template_crud.get_owned(db, template_id=template_id, owner_email=owner_email)
    if template is None:
        raise NotFoundError("Template not found")
    invoice = invoice_crud.create(db, template_id=template.id, data_values=data_values)
    logger.info("Created invoice %s for template %s", invoice.id, template.id)
    return invoice


def list_invoices(db: Session, *, owner_email: str) -> List[Invoice]:
    return invoice_crud.get_multi_for_owner(db, owner_email=owner_email)


def delete_invoice(db: Session, blob_store: BlobStore, *, invoice_id: int, owner_email: str) -> None:
    invoice, _ = get_owned_invoice(
        invoice_id,
        owner_email,
        invoice_repository=SQLInvoiceRepository(db),
        template_repository=SQLTemplateRepository(db),
    )
    if invoice.pdf_blob_key:
        run_side_effect(f"Deleting invoice PDF blob {invoice.pdf_blob_key}", blob_store.delete, invoice.pdf_blob_key)
    invoice_crud.delete(db, db_obj=invoice)
