"""Template schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.schemas.template_field import TemplateFieldRead


class TemplateCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    # Base64-encoded PDF document
    file_data: str = Field(min_length=1)

    model_config = ConfigDict(str_strip_whitespace=True)


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True)


class TemplateRead(BaseModel):
    id: int
    name: str
    source_blob_key: str
    owner_email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TemplateWithFields(TemplateRead):
    fields: List[TemplateFieldRead] = []
