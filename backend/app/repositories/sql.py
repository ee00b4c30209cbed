"""SQLAlchemy-backed repositories bound to one request session."""

from sqlalchemy.orm import Session

from backend.app.crud.crud_invoice import invoice_crud
from backend.app.crud.crud_template import template_crud
from backend.app.repositories.contracts import InvoiceRepository, TemplateRepository


class SQLTemplateRepository(TemplateRepository):
    def __init__(self, db: Session):
        self.db = db

    def find_by_id_with_owner(self, template_id: int):
        return template_crud.get(self.db, template_id=template_id)


class SQLInvoiceRepository(InvoiceRepository):
    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, invoice_id: int):
        return invoice_crud.get(self.db, invoice_id=invoice_id)

    def update_pdf_blob_key(self, invoice_id: int, pdf_blob_key: str):
        return invoice_crud.update_pdf_blob_key(self.db, invoice_id=invoice_id, pdf_blob_key=pdf_blob_key)
