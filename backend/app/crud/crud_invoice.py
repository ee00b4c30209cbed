"""CRUD operations for invoices."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from backend.app.models.invoice import Invoice
from backend.app.models.template import Template


class CRUDInvoice:
    def create(self, db: Session, *, template_id: int, data_values: Dict[str, Any]) -> Invoice:
        obj = Invoice(template_id=template_id, data_values=data_values)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, invoice_id: int) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(joinedload(Invoice.template))
            .filter(Invoice.id == invoice_id)
            .first()
        )

    def get_multi_for_owner(self, db: Session, *, owner_email: str) -> List[Invoice]:
        return (
            db.query(Invoice)
            .join(Template, Invoice.template_id == Template.id)
            .options(joinedload(Invoice.template))
            .filter(Template.owner_email == owner_email)
            .order_by(Invoice.generated_at.desc(), Invoice.id.desc())
            .all()
        )

    def update_pdf_blob_key(self, db: Session, *, invoice_id: int, pdf_blob_key: str) -> Optional[Invoice]:
        invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
        if invoice is None:
            return None
        invoice.pdf_blob_key = pdf_blob_key
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(invoice)
        return invoice

    def delete(self, db: Session, *, db_obj: Invoice) -> Invoice:
        db.delete(db_obj)
        db.commit()
        return db_obj


invoice_crud = CRUDInvoice()
