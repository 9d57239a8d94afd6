"""
Shared fixtures.

Print jobs are written to a per-test temporary directory; the print service
dependency is overridden so no test touches the configured storage path.
"""

import os
import tempfile

# Settings are read at import time; keep the lifespan's default store out of the repo.
os.environ.setdefault("PRINT_JOBS_DIR", tempfile.mkdtemp(prefix="print-jobs-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.deps import get_print_service  # noqa: E402
from app.main import app  # noqa: E402
from app.services.mobile_print import MobilePrintService  # noqa: E402
from app.services.print_job_store import PrintJobStore  # noqa: E402


@pytest.fixture
def store(tmp_path):
    return PrintJobStore(tmp_path / "jobs")


@pytest.fixture
def service(store):
    return MobilePrintService(store)


@pytest.fixture
def client(service):
    """Test client bound to a print service over a temporary job directory."""
    app.dependency_overrides[get_print_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
