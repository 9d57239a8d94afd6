"""Assemble print job requests from sample records."""

from collections.abc import Sequence

from app.models.enums import LabelSize, PrintFormat, PrintMethod, PrintPriority
from app.schemas.print_job import PrintJobRequest, PrintOptions, SampleRecord
from app.services.label_layout import pages_needed


def build_print_job(
    samples: Sequence[SampleRecord],
    print_format: PrintFormat,
    label_size: LabelSize,
    copies: int,
    options: PrintOptions,
    print_method: PrintMethod,
    priority: PrintPriority = PrintPriority.NORMAL,
) -> PrintJobRequest:
    """Build the create-job request for every sample, in input order.

    Only ``copies`` is normalised here (clamped to at least 1); limits on
    batch size and copy count are enforced by the print service.
    """
    return PrintJobRequest.model_construct(
        qr_codes=list(samples),
        print_format=print_format,
        label_size=label_size,
        copies=max(int(copies), 1),
        priority=priority,
        options=options,
        print_method=print_method,
    )


def format_description(sample_count: int, print_format: PrintFormat) -> str:
    """E.g. ``"2 pages needed for 13 samples"``."""
    pages = pages_needed(sample_count, print_format)
    return f"{pages} page{'' if pages == 1 else 's'} needed for {sample_count} samples"
