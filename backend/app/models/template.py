"""Uploaded PDF template and its owner."""

from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship

from backend.app.db.base_class import Base


class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    source_blob_key = Column(String(255), nullable=False, unique=True, index=True)
    owner_email = Column(String(255), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    fields = relationship(
        "TemplateField",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TemplateField.id",
    )
    invoices = relationship("Invoice", back_populates="template", cascade="all, delete-orphan", passive_deletes=True)
