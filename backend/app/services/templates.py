"""Template upload, deletion and field configuration."""

import base64
import binascii
import logging
import secrets

from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationFailure
from backend.app.core.side_effects import run_side_effect
from backend.app.core.time import utc_timestamp_millis
from backend.app.crud.crud_template import template_crud
from backend.app.crud.crud_template_field import template_field_crud
from backend.app.models.invoice import Invoice
from backend.app.models.template import Template
from backend.app.models.template_field import TemplateField
from backend.app.schemas.template import TemplateCreate
from backend.app.schemas.template_field import TemplateFieldCreate, TemplateFieldUpdate
from backend.app.storage.blob_store import BlobStore

logger = logging.getLogger(__name__)

TEMPLATE_NOT_FOUND = "Template not found"
DUPLICATE_FIELD_NAME = "Field name already exists for this template"


def generate_template_blob_key() -> str:
    timestamp = utc_timestamp_millis()
    return f"template_{timestamp}_{secrets.token_hex(4)}.pdf"


def decode_template_file(file_data: str) -> bytes:
    try:
        content = base64.b64decode(file_data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationFailure("file_data must be base64-encoded") from exc
    if not content.startswith(b"%PDF"):
        raise ValidationFailure("file_data must be a PDF document")
    return content


def get_owned_template(db: Session, template_id: int, owner_email: str) -> Template:
    template = template_crud.get_owned(db, template_id=template_id, owner_email=owner_email)
    if template is None:
        raise NotFoundError(TEMPLATE_NOT_FOUND)
    return template


def create_template(db: Session, blob_store: BlobStore, *, template_in: TemplateCreate, owner_email: str) -> Template:
    content = decode_template_file(template_in.file_data)
    blob_key = generate_template_blob_key()
    blob_store.put(blob_key, content)
    try:
        return template_crud.create(db, name=template_in.name, source_blob_key=blob_key, owner_email=owner_email)
    except Exception:
        db.rollback()
        run_side_effect(f"Removing orphaned template blob {blob_key}", blob_store.delete, blob_key)
        raise


def delete_template(db: Session, blob_store: BlobStore, *, template_id: int, owner_email: str) -> Template:
    """Delete the template row (fields and invoices cascade), then its blobs."""
    template = get_owned_template(db, template_id, owner_email)
    blob_keys = [template.source_blob_key]
    blob_keys.extend(
        key
        for (key,) in db.query(Invoice.pdf_blob_key)
        .filter(Invoice.template_id == template.id, Invoice.pdf_blob_key.isnot(None))
        .all()
    )

    deleted = template_crud.delete(db, db_obj=template)
    for key in blob_keys:
        run_side_effect(f"Deleting blob {key}", blob_store.delete, key)
    logger.info("Deleted template %s and %d blob(s)", template_id, len(blob_keys))
    return deleted


def add_field(db: Session, template: Template, field_in: TemplateFieldCreate) -> TemplateField:
    if template_field_crud.get_by_name(db, template_id=template.id, name=field_in.name):
        raise ValidationFailure(DUPLICATE_FIELD_NAME)
    return template_field_crud.create(db, obj_in=field_in, template_id=template.id)


def update_field(db: Session, template: Template, field_id: int, field_in: TemplateFieldUpdate) -> TemplateField:
    field = template_field_crud.get(db, field_id=field_id, template_id=template.id)
    if field is None:
        raise NotFoundError("Field not found")
    if field_in.name is not None and field_in.name != field.name:
        existing = template_field_crud.get_by_name(db, template_id=template.id, name=field_in.name)
        if existing and existing.id != field.id:
            raise ValidationFailure(DUPLICATE_FIELD_NAME)
    return template_field_crud.update(db, db_obj=field, obj_in=field_in)


def delete_field(db: Session, template: Template, field_id: int) -> TemplateField:
    field = template_field_crud.get(db, field_id=field_id, template_id=template.id)
    if field is None:
        raise NotFoundError("Field not found")
    return template_field_crud.delete(db, db_obj=field)
