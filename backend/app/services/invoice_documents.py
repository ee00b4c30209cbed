"""Cache-or-generate access to rendered invoice PDFs.

A rendered PDF is reused for as long as the invoice's ``pdf_blob_key`` can be
fetched. The cache is keyed by the presence of that blob only: edits to the
template or its fields after the first render are not picked up.

Concurrent misses for the same invoice are not coordinated. Each request
renders and stores its own blob and the last key update wins.
"""

import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from backend.app.core.errors import GenerationFailure, StorageMiss, StorageWriteFailure
from backend.app.core.side_effects import SideEffectResult, run_side_effect
from backend.app.core.time import utc_timestamp_millis
from backend.app.repositories.contracts import InvoiceRepository, TemplateRepository
from backend.app.services.ownership import get_owned_invoice
from backend.app.services.pdf_rendering import render_invoice_pdf
from backend.app.storage.blob_store import BlobStore

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"


@dataclass
class RenderedInvoicePdf:
    content: bytes
    blob_key: str
    cache_hit: bool
    # None on a cache hit; the outcome of the invoice key update otherwise
    key_update: Optional[SideEffectResult] = None


def generate_invoice_blob_key(invoice_id: int) -> str:
    timestamp = utc_timestamp_millis()
    return f"invoice_{invoice_id}_{timestamp}_{secrets.token_hex(4)}.pdf"


def _fetch_cached(blob_store: BlobStore, invoice) -> Optional[bytes]:
    key = invoice.pdf_blob_key
    if not key:
        return None
    try:
        content = blob_store.get(key)
    except (StorageMiss, OSError) as exc:
        logger.warning("Invoice %s PDF blob unavailable at %s (%s), generating a new one", invoice.id, key, exc)
        return None
    if not content.startswith(PDF_MAGIC):
        logger.warning("Invoice %s PDF blob at %s is not a PDF, generating a new one", invoice.id, key)
        return None
    return content


def _persist_key(invoice_repository: InvoiceRepository, invoice_id: int, blob_key: str) -> None:
    if invoice_repository.update_pdf_blob_key(invoice_id, blob_key) is None:
        raise StorageWriteFailure(f"Invoice {invoice_id} disappeared before its PDF key could be saved")


def get_or_generate_invoice_pdf(
    invoice,
    template,
    *,
    blob_store: BlobStore,
    invoice_repository: InvoiceRepository,
    renderer: Callable[..., bytes] = render_invoice_pdf,
) -> RenderedInvoicePdf:
    """Return the cached PDF for ``invoice`` or render, store and return a new one.

    Raises GenerationFailure when the template cannot be loaded or rendered and
    StorageWriteFailure when the new blob cannot be stored. A failed update of
    the invoice's key is logged and reported on the result, not raised.
    """
    cached = _fetch_cached(blob_store, invoice)
    if cached is not None:
        return RenderedInvoicePdf(content=cached, blob_key=invoice.pdf_blob_key, cache_hit=True)

    blob_key = generate_invoice_blob_key(invoice.id)
    try:
        try:
            template_bytes = blob_store.get(template.source_blob_key)
        except (StorageMiss, OSError) as exc:
            raise GenerationFailure(f"Template source {template.source_blob_key} unavailable: {exc}") from exc
        content = renderer(template_bytes, template.fields, invoice.data_values or {})
        blob_store.put(blob_key, content)
    except (GenerationFailure, StorageWriteFailure) as exc:
        logger.error(
            "%s: invoice %s (template %s) could not be rendered: %s",
            type(exc).__name__,
            invoice.id,
            template.id,
            exc,
        )
        raise

    key_update = run_side_effect(
        f"Saving PDF key for invoice {invoice.id}",
        _persist_key,
        invoice_repository,
        invoice.id,
        blob_key,
        log_failures=False,
    )
    if not key_update.ok:
        logger.error(
            "StorageWriteFailure: invoice %s (template %s) rendered to %s but the key was not saved: %s",
            invoice.id,
            template.id,
            blob_key,
            key_update.error,
        )
    return RenderedInvoicePdf(content=content, blob_key=blob_key, cache_hit=False, key_update=key_update)


def get_invoice_pdf(
    invoice_id: int,
    requester_email: str,
    *,
    invoice_repository: InvoiceRepository,
    template_repository: TemplateRepository,
    blob_store: BlobStore,
) -> RenderedInvoicePdf:
    """Ownership-checked entry point used by the document endpoint."""
    invoice, template = get_owned_invoice(
        invoice_id,
        requester_email,
        invoice_repository=invoice_repository,
        template_repository=template_repository,
    )
    return get_or_generate_invoice_pdf(
        invoice,
        template,
        blob_store=blob_store,
        invoice_repository=invoice_repository,
    )
