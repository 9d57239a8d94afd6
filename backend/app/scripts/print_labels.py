"""Print QR labels for the samples listed in a CSV file.

Each row is one mosquito pool. Columns use the same names as the API:

  poolId, trapId, collectionDate, latitude, longitude, species,
  collectedBy, laboratoryId

Only poolId is required; laboratoryId falls back to --lab. The job is
created on the print service and delivered with the chosen method.

Usage:
  cd backend
  python -m app.scripts.print_labels samples.csv [--format SHEET_LAYOUT]
      [--method PDF_DOWNLOAD] [--copies 2] [--url http://localhost:8000]
"""

import argparse
import asyncio
import csv
import dataclasses
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from app.client.generator import MobileQRGenerator
from app.client.platform import DesktopPlatform
from app.client.print_client import MobilePrintClient
from app.config import settings
from app.models.enums import LabelSize, PrintFormat, PrintMethod
from app.schemas.print_job import SampleRecord

logger = logging.getLogger(__name__)

SAMPLE_COLUMNS = (
    "poolId",
    "trapId",
    "collectionDate",
    "latitude",
    "longitude",
    "species",
    "collectedBy",
    "laboratoryId",
)


def load_samples(path: Path, default_lab: str) -> list[SampleRecord]:
    """Read sample rows from a CSV file. Blank cells are treated as missing."""
    samples: list[SampleRecord] = []
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            data = {
                col: (row.get(col) or "").strip() or None
                for col in SAMPLE_COLUMNS
            }
            data["laboratoryId"] = data["laboratoryId"] or default_lab
            try:
                samples.append(SampleRecord.model_validate(data))
            except ValidationError as exc:
                raise ValueError(f"Line {line_no}: {exc.errors()[0]['msg']}") from exc
    return samples


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print QR code labels for mosquito pools")
    parser.add_argument("csv_file", type=Path, help="CSV file with one sample per row")
    parser.add_argument(
        "--format",
        choices=[f.value for f in PrintFormat],
        default=PrintFormat.SHEET_LAYOUT.value,
    )
    parser.add_argument(
        "--size",
        choices=[s.value for s in LabelSize],
        default=LabelSize.MEDIUM_25MM.value,
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in PrintMethod],
        default=PrintMethod.PDF_DOWNLOAD.value,
    )
    parser.add_argument("--copies", type=int, default=1)
    parser.add_argument("--text", action=argparse.BooleanOptionalAction, default=True,
                        help="Print pool id and date under each code")
    parser.add_argument("--border", action="store_true")
    parser.add_argument("--logo", action="store_true")
    parser.add_argument("--lab", default=settings.DEFAULT_LABORATORY_ID,
                        help="Laboratory id for rows without one")
    parser.add_argument("--url", default=settings.PRINT_SERVICE_URL,
                        help="Print service base URL")
    parser.add_argument("--download-dir", default=settings.DOWNLOAD_DIR)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    try:
        samples = load_samples(args.csv_file, args.lab)
    except (OSError, ValueError) as exc:
        logger.error("Could not read %s: %s", args.csv_file, exc)
        return 2
    if not samples:
        logger.error("No samples in %s", args.csv_file)
        return 2

    generator = MobileQRGenerator(
        samples,
        MobilePrintClient(args.url),
        DesktopPlatform(args.download_dir),
    )
    generator.selected_format = PrintFormat(args.format)
    generator.selected_method = PrintMethod(args.method)
    generator.settings = dataclasses.replace(
        generator.settings,
        label_size=LabelSize(args.size),
        include_text=args.text,
        include_border=args.border,
        include_logo=args.logo,
        copies=args.copies,
    )

    fmt = next(o for o in generator.format_options() if o["id"] == generator.selected_format)
    logger.info("%s: %s", fmt["name"], fmt["summary"])

    job_id = asyncio.run(generator.print_labels())
    if job_id is None:
        return 1
    logger.info("Print job %s done", job_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
