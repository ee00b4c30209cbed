"""CRUD operations for template fields."""

from typing import List, Optional

from sqlalchemy.orm import Session

from backend.app.models.template_field import TemplateField
from backend.app.schemas.template_field import TemplateFieldCreate, TemplateFieldUpdate


class CRUDTemplateField:
    def create(self, db: Session, *, obj_in: TemplateFieldCreate, template_id: int) -> TemplateField:
        obj = TemplateField(template_id=template_id, **obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, field_id: int, template_id: int) -> Optional[TemplateField]:
        return (
            db.query(TemplateField)
            .filter(TemplateField.id == field_id, TemplateField.template_id == template_id)
            .first()
        )

    def get_by_name(self, db: Session, *, template_id: int, name: str) -> Optional[TemplateField]:
        return (
            db.query(TemplateField)
            .filter(TemplateField.template_id == template_id, TemplateField.name == name)
            .first()
        )

    def get_multi(self, db: Session, *, template_id: int) -> List[TemplateField]:
        return (
            db.query(TemplateField)
            .filter(TemplateField.template_id == template_id)
            .order_by(TemplateField.id.asc())
            .all()
        )

    def update(self, db: Session, *, db_obj: TemplateField, obj_in: TemplateFieldUpdate) -> TemplateField:
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: TemplateField) -> TemplateField:
        db.delete(db_obj)
        db.commit()
        return db_obj


template_field_crud = CRUDTemplateField()
