"""Positioned slot on a template where an invoice value is drawn.

Positions and sizes are in the top-left-origin page space of the field
editor; conversion to PDF space happens at render time.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base

FIELD_TYPES = ("text", "number", "date")
DEFAULT_FIELD_COLOR = "#000000"


class TemplateField(Base):
    __tablename__ = "template_fields"
    __table_args__ = (UniqueConstraint("template_id", "name", name="uq_template_field_name"),)

    id = Column(Integer, primary_key=True, index=True)
    template_id = Column(Integer, ForeignKey("templates.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    x_position = Column(Numeric(10, 2), nullable=False)
    y_position = Column(Numeric(10, 2), nullable=False)
    width = Column(Numeric(10, 2), nullable=False)
    height = Column(Numeric(10, 2), nullable=False)
    font_size = Column(Numeric(5, 2), nullable=False, default=12)
    field_type = Column(String(50), nullable=False, default="text")
    color_hex = Column(String(7), nullable=False, default=DEFAULT_FIELD_COLOR)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    template = relationship("Template", back_populates="fields")
