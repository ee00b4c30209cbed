"""Template upload and management endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.errors import NotFoundError, StorageWriteFailure, ValidationFailure
from backend.app.core.security import get_current_user
from backend.app.crud.crud_template import template_crud
from backend.app.db.session import get_db
from backend.app.dependencies.storage import get_blob_store
from backend.app.models.user import User
from backend.app.schemas.template import TemplateCreate, TemplateRead, TemplateUpdate, TemplateWithFields
from backend.app.services import templates as template_service
from backend.app.storage.blob_store import BlobStore

router = APIRouter(prefix="/templates", tags=["templates"])


def _get_owned_template(db: Session, template_id: int, owner_email: str):
    try:
        return template_service.get_owned_template(db, template_id, owner_email)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/", response_model=TemplateRead, status_code=status.HTTP_201_CREATED)
def upload_template(
    template_in: TemplateCreate,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    try:
        return template_service.create_template(db, blob_store, template_in=template_in, owner_email=current_user.email)
    except ValidationFailure as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    except StorageWriteFailure:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to upload template file")


@router.get("/", response_model=list[TemplateRead])
async def list_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return template_crud.get_multi(db, owner_email=current_user.email)


@router.get("/{template_id}", response_model=TemplateWithFields)
async def get_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_owned_template(db, template_id, current_user.email)


@router.put("/{template_id}", response_model=TemplateRead)
async def update_template(
    template_id: int,
    template_in: TemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = _get_owned_template(db, template_id, current_user.email)
    return template_crud.update(db, db_obj=template, obj_in=template_in)


@router.delete("/{template_id}", response_model=TemplateRead)
async def delete_template(
    template_id: int,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    try:
        return template_service.delete_template(db, blob_store, template_id=template_id, owner_email=current_user.email)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
