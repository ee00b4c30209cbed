"""Invoice data applied to a template, plus the pointer to its cached PDF."""

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    template_id = Column(Integer, ForeignKey("templates.id", ondelete="CASCADE"), nullable=False, index=True)
    data_values = Column(JSON, nullable=False, default=dict)
    generated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
    pdf_blob_key = Column(String(255), nullable=True)

    template = relationship("Template", back_populates="invoices")

    @property
    def template_name(self):
        return self.template.name if self.template is not None else None
