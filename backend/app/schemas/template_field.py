"""Template field schemas.

Field definitions are validated here, at configuration time. The renderer
trusts stored values and only falls back (e.g. to black) when they are off.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

FieldType = Literal["text", "number", "date"]


class TemplateFieldBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    x_position: float = Field(ge=0)
    y_position: float = Field(ge=0)
    width: float = Field(ge=0)
    height: float = Field(ge=0)
    font_size: float = Field(default=12, ge=8, le=72)
    field_type: FieldType = "text"
    color_hex: str = Field(default="#000000", pattern=HEX_COLOR_PATTERN)


class TemplateFieldCreate(TemplateFieldBase):
    pass


class TemplateFieldUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    x_position: Optional[float] = Field(default=None, ge=0)
    y_position: Optional[float] = Field(default=None, ge=0)
    width: Optional[float] = Field(default=None, ge=0)
    height: Optional[float] = Field(default=None, ge=0)
    font_size: Optional[float] = Field(default=None, ge=8, le=72)
    field_type: Optional[FieldType] = None
    color_hex: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)


class TemplateFieldRead(TemplateFieldBase):
    id: int
    template_id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
