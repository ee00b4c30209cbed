"""Owner registration.

The registered email becomes ``Template.owner_email`` for everything the
owner uploads, so it is stored in a single canonical lowercase form.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash, normalize_owner_email
from backend.app.db.session import get_db
from backend.app.models.user import User
from backend.app.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
async def register_owner(owner_in: UserCreate, db: Session = Depends(get_db)):
    email = normalize_owner_email(owner_in.email)
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    owner = User(email=email, hashed_password=get_password_hash(owner_in.password))
    db.add(owner)
    db.commit()
    db.refresh(owner)
    logger.info("Registered template owner %s", owner.id)
    return owner
