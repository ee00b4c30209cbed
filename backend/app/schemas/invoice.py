"""Invoice schemas."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceCreate(BaseModel):
    template_id: int = Field(gt=0)
    invoice_data: Dict[str, Any]


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    template_id: int
    template_name: Optional[str] = None
    data_values: Dict[str, Any]
    generated_at: datetime
    pdf_blob_key: Optional[str] = None
