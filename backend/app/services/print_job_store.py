"""Filesystem-backed storage for mobile print jobs.

Each job is two or three files in one directory:
  <id>.json  job record
  <id>.html  rendered label document
  <id>.pdf   PDF rendition, created on first download
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from app.schemas.print_job import PrintJob

logger = logging.getLogger(__name__)

_JOB_ID_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_STAMP_RE = re.compile(r"^MPJ_(\d+)")
DOCUMENT_SUFFIXES = (".html", ".pdf")


def _stamp_key(path: Path) -> tuple[int, str]:
    match = _STAMP_RE.match(path.stem)
    return (int(match.group(1)) if match else 0, path.stem)


class PrintJobStore:
    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, job_id: str, suffix: str) -> Path:
        if not _JOB_ID_RE.match(job_id or ""):
            raise ValueError(f"Invalid print job id: {job_id!r}")
        return self.root / f"{job_id}{suffix}"

    # ── Job records ───────────────────────────────────────────────────

    def save(self, job: PrintJob) -> None:
        self._path(job.id, ".json").write_text(
            job.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )

    def get(self, job_id: str) -> PrintJob | None:
        try:
            path = self._path(job_id, ".json")
        except ValueError:
            return None
        if not path.exists():
            return None
        try:
            return PrintJob.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError):
            logger.warning("Unreadable print job record: %s", path, exc_info=True)
            return None

    def list_recent(self, limit: int = 10) -> list[PrintJob]:
        """Return the newest ``limit`` jobs, newest first.

        Files are ordered by the creation stamp in the job id, so only about
        ``limit`` records are read however many jobs are stored.
        """
        jobs: list[PrintJob] = []
        for path in sorted(self.root.glob("*.json"), key=_stamp_key, reverse=True):
            if len(jobs) >= limit:
                break
            job = self.get(path.stem)
            if job is not None:
                jobs.append(job)
        jobs.sort(key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    # ── Rendered documents ────────────────────────────────────────────

    def save_document(self, job_id: str, suffix: str, content: str | bytes) -> Path:
        if suffix not in DOCUMENT_SUFFIXES:
            raise ValueError(f"Unsupported document type: {suffix}")
        path = self._path(job_id, suffix)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path

    def document_path(self, job_id: str, suffix: str) -> Path | None:
        try:
            path = self._path(job_id, suffix)
        except ValueError:
            return None
        return path if path.exists() else None

    # ── Cleanup ───────────────────────────────────────────────────────

    def delete(self, job_id: str) -> None:
        for suffix in (".json", *DOCUMENT_SUFFIXES):
            self._path(job_id, suffix).unlink(missing_ok=True)

    def purge_older_than(self, cutoff: datetime) -> int:
        """Delete every job created before ``cutoff``. Returns the count."""
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=timezone.utc)
        removed = 0
        for path in self.root.glob("*.json"):
            job = self.get(path.stem)
            if job is None:
                continue
            created = job.created_at
            if created.tzinfo is None:
                created = created.replace(tzinfo=timezone.utc)
            if created < cutoff:
                self.delete(job.id)
                removed += 1
        return removed
