"""Invoice ownership checks.

An invoice has no owner of its own; it belongs to whoever owns its template.
A missing invoice, a missing template and someone else's template all raise
the same NotFoundError so callers cannot discover which invoice ids exist.
"""

from backend.app.core.errors import NotFoundError
from backend.app.repositories.contracts import InvoiceRepository, TemplateRepository

INVOICE_NOT_FOUND = "Invoice not found"


def verify_invoice_ownership(invoice, requester_email: str, template_repository: TemplateRepository):
    """Return the invoice's template if ``requester_email`` owns it."""
    if invoice is None:
        raise NotFoundError(INVOICE_NOT_FOUND)
    template = template_repository.find_by_id_with_owner(invoice.template_id)
    if template is None or template.owner_email != requester_email:
        raise NotFoundError(INVOICE_NOT_FOUND)
    return template


def get_owned_invoice(
    invoice_id: int,
    requester_email: str,
    *,
    invoice_repository: InvoiceRepository,
    template_repository: TemplateRepository,
):
    """Load an invoice and its template, enforcing the ownership chain."""
    invoice = invoice_repository.find_by_id(invoice_id)
    template = verify_invoice_ownership(invoice, requester_email, template_repository)
    return invoice, template
