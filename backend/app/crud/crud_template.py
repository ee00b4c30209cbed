"""CRUD operations for templates."""

from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from backend.app.models.template import Template
from backend.app.schemas.template import TemplateUpdate


class CRUDTemplate:
    def create(self, db: Session, *, name: str, source_blob_key: str, owner_email: str) -> Template:
        obj = Template(name=name, source_blob_key=source_blob_key, owner_email=owner_email)
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, template_id: int) -> Optional[Template]:
        return (
            db.query(Template)
            .options(selectinload(Template.fields))
            .filter(Template.id == template_id)
            .first()
        )

    def get_owned(self, db: Session, *, template_id: int, owner_email: str) -> Optional[Template]:
        return (
            db.query(Template)
            .options(selectinload(Template.fields))
            .filter(Template.id == template_id, Template.owner_email == owner_email)
            .first()
        )

    def get_multi(self, db: Session, *, owner_email: str) -> List[Template]:
        return (
            db.query(Template)
            .filter(Template.owner_email == owner_email)
            .order_by(Template.created_at.desc(), Template.id.desc())
            .all()
        )

    def count_for_owner(self, db: Session, *, owner_email: str) -> int:
        return db.query(Template).filter(Template.owner_email == owner_email).count()

    def update(self, db: Session, *, db_obj: Template, obj_in: TemplateUpdate) -> Template:
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: Template) -> Template:
        db.delete(db_obj)
        db.commit()
        return db_obj


template_crud = CRUDTemplate()
