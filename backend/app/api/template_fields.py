"""Field layout endpoints for a template."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, ValidationFailure
from backend.app.core.security import get_current_user
from backend.app.crud.crud_template_field import template_field_crud
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.template_field import TemplateFieldCreate, TemplateFieldRead, TemplateFieldUpdate
from backend.app.services import templates as template_service

router = APIRouter(prefix="/templates/{template_id}/fields", tags=["template_fields"])


def _get_owned_template(db: Session, template_id: int, owner_email: str):
    try:
        return template_service.get_owned_template(db, template_id, owner_email)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/", response_model=list[TemplateFieldRead])
async def list_fields(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = _get_owned_template(db, template_id, current_user.email)
    return template_field_crud.get_multi(db, template_id=template.id)


@router.post("/", response_model=TemplateFieldRead, status_code=status.HTTP_201_CREATED)
async def create_field(
    template_id: int,
    field_in: TemplateFieldCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_owned_template(db, template_id, current_user.email)
    try:
        return template_service.add_field(db, template, field_in)
    except ValidationFailure as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.put("/{field_id}", response_model=TemplateFieldRead)
async def update_field(
    template_id: int,
    field_id: int,
    field_in: TemplateFieldUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_owned_template(db, template_id, current_user.email)
    try:
        return template_service.update_field(db, template, field_id, field_in)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ValidationFailure as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.delete("/{field_id}", response_model=TemplateFieldRead)
async def delete_field(
    template_id: int,
    field_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_owned_template(db, template_id, current_user.email)
    try:
        return template_service.delete_field(db, template, field_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
