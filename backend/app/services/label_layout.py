"""Page geometry for the three label formats.

  - Individual labels: one large QR code per A4 page
  - Sheet layout: 3 x 4 grid, 12 labels per A4 page
  - Adhesive labels: 3 x 8 grid, 24 labels per page (Avery 5160 style)
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from app.models.enums import LabelSize, PrintFormat

T = TypeVar("T")


@dataclass(frozen=True)
class LabelLayout:
    labels_per_page: int
    columns: int
    rows: int
    max_qr_mm: float
    qr_width_px: int
    template: str
    name: str
    description: str
    paper_type: str
    recommended: bool = False


LAYOUTS: dict[PrintFormat, LabelLayout] = {
    PrintFormat.INDIVIDUAL_LABELS: LabelLayout(
        labels_per_page=1,
        columns=1,
        rows=1,
        max_qr_mm=60,
        qr_width_px=200,
        template="individual.html",
        name="Individual Labels",
        description="One large QR code per page - best for immediate use",
        paper_type="Standard A4",
    ),
    PrintFormat.SHEET_LAYOUT: LabelLayout(
        labels_per_page=12,
        columns=3,
        rows=4,
        max_qr_mm=40,
        qr_width_px=150,
        template="sheet.html",
        name="Sheet Layout",
        description="12 QR codes per page - efficient batch printing",
        paper_type="Standard A4",
        recommended=True,
    ),
    PrintFormat.ADHESIVE_LABELS: LabelLayout(
        labels_per_page=24,
        columns=3,
        rows=8,
        max_qr_mm=22,
        qr_width_px=120,
        template="adhesive.html",
        name="Adhesive Labels",
        description="24 labels per page - Avery 5160 compatible",
        paper_type="Avery 5160 Labels",
    ),
}

LABEL_SIZE_MM: dict[LabelSize, float] = {
    LabelSize.SMALL_20MM: 20,
    LabelSize.MEDIUM_25MM: 25,
    LabelSize.LARGE_30MM: 30,
}

LABEL_SIZE_INFO: dict[LabelSize, tuple[str, str]] = {
    LabelSize.SMALL_20MM: ("Small (20mm)", "Compact labels for small containers"),
    LabelSize.MEDIUM_25MM: ("Medium (25mm)", "Standard laboratory labels"),
    LabelSize.LARGE_30MM: ("Large (30mm)", "Large labels for easy scanning"),
}


def labels_per_page(print_format: PrintFormat) -> int:
    return LAYOUTS[print_format].labels_per_page


def pages_needed(label_count: int, print_format: PrintFormat) -> int:
    """Number of printed pages for ``label_count`` labels in ``print_format``."""
    if label_count <= 0:
        return 0
    return math.ceil(label_count / labels_per_page(print_format))


def qr_size_mm(print_format: PrintFormat, label_size: LabelSize) -> float:
    return min(LABEL_SIZE_MM[label_size], LAYOUTS[print_format].max_qr_mm)


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def expand_copies(items: Sequence[T], copies: int) -> list[T]:
    """Repeat each item ``copies`` times, keeping copies of a sample adjacent."""
    return [item for item in items for _ in range(max(copies, 1))]
