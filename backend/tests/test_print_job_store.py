"""
Unit tests for the filesystem print job store.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from app.models.enums import LabelSize, PrintFormat, PrintMethod
from app.schemas.print_job import PrintJob
from app.services.print_job_store import PrintJobStore
from helpers import make_sample


def make_job(job_id="MPJ_1_aaaaaaaaa", created_at=None) -> PrintJob:
    return PrintJob(
        id=job_id,
        qr_codes=[make_sample()],
        format=PrintFormat.SHEET_LAYOUT,
        label_size=LabelSize.MEDIUM_25MM,
        print_method=PrintMethod.PDF_DOWNLOAD,
        laboratory_id="LAB-AZ",
        label_count=1,
        pages_needed=1,
        created_at=created_at or datetime.now(timezone.utc),
    )


def test_save_and_get(store):
    job = make_job()
    store.save(job)

    assert store.get(job.id).model_dump() == job.model_dump()
    assert (store.root / f"{job.id}.json").exists()


def test_record_is_camel_case_json(store):
    store.save(make_job())
    text = (store.root / "MPJ_1_aaaaaaaaa.json").read_text()
    assert '"labelSize"' in text
    assert '"qrCodes"' in text


def test_get_unknown_or_unsafe_id(store):
    assert store.get("MPJ_missing") is None
    assert store.get("../../etc/passwd") is None


def test_get_unreadable_record(store):
    (store.root / "broken.json").write_text("{not json")
    assert store.get("broken") is None


def test_list_recent_newest_first(store):
    now = datetime.now(timezone.utc)
    for i in range(3):
        store.save(make_job(f"MPJ_{i}", created_at=now + timedelta(minutes=i)))

    assert [j.id for j in store.list_recent(2)] == ["MPJ_2", "MPJ_1"]


def test_list_recent_reads_only_newest_records(store):
    now = datetime.now(timezone.utc)
    for i in range(1, 21):
        store.save(make_job(f"MPJ_{i}_aaaaaaaaa", created_at=now + timedelta(seconds=i)))

    with patch.object(store, "get", wraps=store.get) as get:
        recent = store.list_recent(3)

    assert [j.id for j in recent] == ["MPJ_20_aaaaaaaaa", "MPJ_19_aaaaaaaaa", "MPJ_18_aaaaaaaaa"]
    assert get.call_count == 3


def test_list_recent_skips_unreadable_records(store):
    now = datetime.now(timezone.utc)
    store.save(make_job("MPJ_1_aaaaaaaaa", created_at=now))
    (store.root / "MPJ_2_broken.json").write_text("{not json")

    assert [j.id for j in store.list_recent(1)] == ["MPJ_1_aaaaaaaaa"]


def test_documents(store):
    store.save_document("MPJ_1", ".html", "<html></html>")
    store.save_document("MPJ_1", ".pdf", b"%PDF")

    assert store.document_path("MPJ_1", ".html").read_text() == "<html></html>"
    assert store.document_path("MPJ_1", ".pdf").read_bytes() == b"%PDF"
    assert store.document_path("MPJ_2", ".html") is None


def test_save_document_rejects_other_types(store):
    with pytest.raises(ValueError):
        store.save_document("MPJ_1", ".exe", b"")


def test_save_rejects_path_components(store):
    with pytest.raises(ValueError):
        store.save(make_job("../escape"))


def test_purge_older_than(store):
    old = make_job("MPJ_old", created_at=datetime.now(timezone.utc) - timedelta(days=5))
    new = make_job("MPJ_new")
    store.save(old)
    store.save(new)
    store.save_document("MPJ_old", ".html", "<html></html>")

    removed = store.purge_older_than(datetime.now(timezone.utc) - timedelta(days=3))

    assert removed == 1
    assert store.get("MPJ_old") is None
    assert store.document_path("MPJ_old", ".html") is None
    assert store.get("MPJ_new") is not None


def test_creates_root_directory(tmp_path):
    root = tmp_path / "a" / "b"
    PrintJobStore(root)
    assert root.is_dir()
