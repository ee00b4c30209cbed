"""Lookups the rendering core needs, independent of any database."""

from abc import ABC, abstractmethod


class TemplateRepository(ABC):
    @abstractmethod
    def find_by_id_with_owner(self, template_id: int):
        """Return the template with ``owner_email`` and ``fields`` loaded, or None."""


class InvoiceRepository(ABC):
    @abstractmethod
    def find_by_id(self, invoice_id: int):
        """Return the invoice or None."""

    @abstractmethod
    def update_pdf_blob_key(self, invoice_id: int, pdf_blob_key: str):
        """Point the invoice at a new rendered blob; None if the invoice is gone."""
