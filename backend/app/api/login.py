"""Login endpoint and the current owner's profile."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import create_access_token, get_current_user, normalize_owner_email, verify_password
from backend.app.crud.crud_template import template_crud
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.login import LoginRequest
from backend.app.schemas.user import OwnerProfile

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == normalize_owner_email(credentials.email)).first()
    if not user or not user.hashed_password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is inactive")
    if not verify_password(credentials.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials")

    return {"access_token": create_access_token(user_id=user.id), "token_type": "bearer"}


@router.get("/me", response_model=OwnerProfile)
def read_me(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    # The email here is the owner key every template and invoice lookup is scoped by
    return OwnerProfile(
        id=current_user.id,
        email=current_user.email,
        template_count=template_crud.count_for_owner(db, owner_email=current_user.email),
    )
