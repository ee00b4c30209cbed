"""Overlay invoice values onto the first page of a template PDF.

Field positions are stored top-left origin with y growing downwards (the
field editor's space). ReportLab and PDF place text baselines in a
bottom-left origin space with y growing upwards, so only y is converted.
"""

import io
import logging
import re
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional

import pypdf
import reportlab.pdfgen.canvas

from backend.app.core.errors import GenerationFailure
from backend.app.core.settings import get_settings
from backend.app.models.template_field import DEFAULT_FIELD_COLOR

logger = logging.getLogger(__name__)

_HEX_DIGITS = re.compile(r"[0-9a-f]{6}")


class RGBColor(NamedTuple):
    r: float
    g: float
    b: float


BLACK = RGBColor(0.0, 0.0, 0.0)


class ResolvedFieldValue(NamedTuple):
    field: Any
    text: str


def hex_to_rgb(hex_color: Optional[str]) -> RGBColor:
    """Parse ``#RRGGBB`` (``#`` optional, any case) into 0-1 channels.

    Anything that is not exactly six hex digits renders black.
    """
    if hex_color is None:
        hex_color = DEFAULT_FIELD_COLOR
    clean = str(hex_color).lower()
    if clean.startswith("#"):
        clean = clean[1:]
    if not _HEX_DIGITS.fullmatch(clean):
        logger.warning("Invalid hex color %r, defaulting to black", hex_color)
        return BLACK
    return RGBColor(
        int(clean[0:2], 16) / 255,
        int(clean[2:4], 16) / 255,
        int(clean[4:6], 16) / 255,
    )


def to_pdf_y(page_height: float, stored_y: float, font_size: float) -> float:
    # Subtracting the font size puts the top of the glyphs near stored_y.
    return page_height - stored_y - font_size


def _display_text(value: Any) -> str:
    # Booleans keep their JSON spelling
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def resolve_field_values(fields: Iterable[Any], data_values: Mapping[str, Any]) -> List[ResolvedFieldValue]:
    """Pair each field with the display string of its value.

    Fields whose value is missing, None or an empty string are skipped.
    Values are drawn as ``str(value)`` (booleans as ``true``/``false``);
    field_type does not change formatting.
    """
    resolved = []
    for field in fields:
        value = data_values.get(field.name)
        if value is None:
            continue
        text = _display_text(value)
        if text == "":
            continue
        resolved.append(ResolvedFieldValue(field=field, text=text))
    return resolved


def _load_template(template_bytes: bytes) -> pypdf.PdfReader:
    try:
        reader = pypdf.PdfReader(io.BytesIO(template_bytes))
        page_count = len(reader.pages)
    except Exception as exc:
        raise GenerationFailure(f"Template is not a readable PDF: {exc}") from exc
    if page_count == 0:
        raise GenerationFailure("Template PDF has no pages")
    return reader


def _build_overlay(page_width: float, page_height: float, values: List[ResolvedFieldValue], font_name: str):
    buffer = io.BytesIO()
    pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(page_width, page_height))
    for value in values:
        field = value.field
        font_size = float(field.font_size)
        color = hex_to_rgb(field.color_hex)
        pdf.setFillColorRGB(color.r, color.g, color.b)
        pdf.setFont(font_name, font_size)
        pdf.drawString(
            float(field.x_position),
            to_pdf_y(page_height, float(field.y_position), font_size),
            value.text,
        )
    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    return pypdf.PdfReader(buffer).pages[0]


def render_invoice_pdf(template_bytes: bytes, fields: Iterable[Any], data_values: Mapping[str, Any]) -> bytes:
    """Draw the invoice values on page 0 of the template and return the new PDF."""
    reader = _load_template(template_bytes)
    values = resolve_field_values(fields, data_values or {})
    font_name = get_settings().pdf_font_name

    try:
        page = reader.pages[0]
        page_width = float(page.mediabox.width)
        page_height = float(page.mediabox.height)
        overlay = _build_overlay(page_width, page_height, values, font_name)

        writer = pypdf.PdfWriter(clone_from=reader)
        writer.pages[0].merge_page(overlay)
        output = io.BytesIO()
        writer.write(output)
    except Exception as exc:
        raise GenerationFailure(f"Failed to render invoice overlay: {exc}") from exc

    logger.debug("Rendered %d field value(s) onto %.0fx%.0f page", len(values), page_width, page_height)
    return output.getvalue()
