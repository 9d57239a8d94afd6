"""Label sheet rendering: Jinja2 templates to HTML, WeasyPrint for PDF."""

import logging
import pathlib
from collections.abc import Sequence
from datetime import datetime, timezone

from jinja2 import Environment, FileSystemLoader

from app.config import settings
from app.core.sanitize import strip_control_chars
from app.models.enums import LabelSize, PrintFormat
from app.schemas.print_job import PrintOptions, SampleRecord
from app.services.label_layout import LAYOUTS, chunk, expand_copies, qr_size_mm
from app.services.qr_code import encode_payload, payload_to_string, qr_data_url

logger = logging.getLogger(__name__)

_TEMPLATE_DIR = pathlib.Path(__file__).parent / "label_templates"
_jinja_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=True,
)


def _label_context(sample: SampleRecord, qr_src: str) -> dict:
    species = strip_control_chars(sample.species or "").replace("_", " ")
    return {
        "qr_src": qr_src,
        "pool_id": strip_control_chars(sample.pool_id),
        "trap_id": strip_control_chars(sample.trap_id or ""),
        "collection_date": sample.collection_date.strftime("%d/%m/%Y") if sample.collection_date else "",
        "species": species,
        "collected_by": strip_control_chars(sample.collected_by or ""),
    }


def render_labels_html(
    job_id: str,
    samples: Sequence[SampleRecord],
    print_format: PrintFormat,
    label_size: LabelSize,
    options: PrintOptions,
    copies: int = 1,
) -> str:
    """Render every label of a job into one printable HTML document.

    Samples keep their input order; copies of the same sample sit next to
    each other. A QR image is rendered once per distinct payload.
    """
    layout = LAYOUTS[print_format]
    box_size = max(layout.qr_width_px // 25, 2)

    images: dict[str, str] = {}
    labels = []
    for sample in expand_copies(samples, copies):
        payload = payload_to_string(encode_payload(sample))
        if payload not in images:
            images[payload] = qr_data_url(payload, box_size=box_size, border=1)
        labels.append(_label_context(sample, images[payload]))

    template = _jinja_env.get_template(layout.template)
    return template.render(
        job_id=job_id,
        pages=chunk(labels, layout.labels_per_page),
        layout=layout,
        qr_mm=qr_size_mm(print_format, label_size),
        options=options,
        logo_text=settings.LABEL_LOGO_TEXT,
        generated_at=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
    )


def render_pdf(html_str: str) -> bytes:
    """Convert a rendered label document to PDF bytes via WeasyPrint."""
    # WeasyPrint pulls in Pango/Cairo; only load it when a PDF is requested.
    from weasyprint import HTML

    return HTML(string=html_str).write_pdf()
